"""countryfetch -- look up country reference data from the command line.

Fetches the REST Countries dataset once, caches it on disk, and answers
lookups from the cache until it goes stale (seven days by default).

Typical workflow::

    countryfetch sync --with-flags   # fetch the dataset and render flag art
    countryfetch name france         # details for one country
    countryfetch capital canberra    # reverse lookup by capital

Modules:
    app: Typer application and CLI entry point.
    sync: Staleness policy and dataset synchronisation.
    index: Name, capital and region lookups.
    cache: On-disk key/value store with atomic writes.
    client: HTTP client for the dataset endpoint.
    flags: Flag image to text rendering.
    models: Pydantic models shared across the package.
    config: XDG paths and settings resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
