"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~countryfetch.exceptions.CountryfetchError` subclass.
Shell wrappers can inspect the exit code to tell a missing country apart
from a network failure without parsing stderr.

Example::

    $ countryfetch name atlantis
    $ echo $?
    4   # EXIT_NOT_FOUND -- no country matched the query
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""No country matched the name or capital query."""

EXIT_FETCH_ERROR = 6
"""The remote dataset could not be fetched (network failure or non-2xx response)."""

EXIT_PARSE_ERROR = 7
"""A remote or cached payload did not match the expected shape."""

EXIT_CORRUPT_CACHE = 8
"""The cache claimed to be fresh but a required entry was missing or unreadable."""

EXIT_EMPTY_DATASET = 9
"""The operation needs at least one country but the dataset is empty."""
