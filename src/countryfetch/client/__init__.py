"""HTTP client module for countryfetch.

Provides :class:`CountriesClient`, a blocking client backed by
:class:`httpx.Client` that fetches the bulk country dataset and raw flag
images. It is used as a context manager and maps every failure onto the
:mod:`countryfetch.exceptions` hierarchy.

Example::

    from countryfetch.client import CountriesClient

    with CountriesClient(settings) as client:
        raw = client.fetch_countries()
"""

from countryfetch.client.sync_client import CountriesClient

__all__ = ["CountriesClient"]
