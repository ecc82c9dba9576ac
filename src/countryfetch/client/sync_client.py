"""Synchronous HTTP client for the REST Countries API and flag images.

This module provides :class:`CountriesClient`, a thin wrapper around
:class:`httpx.Client` that knows the dataset endpoint and maps transport
failures and non-2xx responses onto
:class:`~countryfetch.exceptions.FetchError`.

Requests are never retried. A failed fetch surfaces to the user and a new
invocation is needed to try again.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from countryfetch.exceptions import FetchError, ParseError
from countryfetch.models import DATASET_FIELDS, Settings
from countryfetch.output import get_output


class CountriesClient:
    """Blocking HTTP client for the country dataset.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        settings: Resolved settings providing ``base_url``, ``timeout``
            and ``verify_ssl``.
        transport: Optional custom :mod:`httpx` transport. Tests pass an
            :class:`httpx.MockTransport` here.

    Example::

        with CountriesClient(settings) as client:
            raw = client.fetch_countries()
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> CountriesClient:
        kwargs: dict[str, Any] = {
            "timeout": self._settings.timeout,
            "verify": self._settings.verify_ssl,
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        self._client = httpx.Client(**kwargs)
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    @property
    def dataset_url(self) -> str:
        """Full URL of the bulk endpoint, without the query string."""
        base = self._settings.base_url
        if not base.endswith("/"):
            base += "/"
        return f"{base}all"

    def fetch_countries(self) -> Any:  # noqa: ANN401
        """Fetch the bulk dataset with the fixed field projection.

        Returns:
            The decoded JSON body. Shape validation is left to the caller.

        Raises:
            FetchError: On network errors or non-2xx responses.
            ParseError: If the body is not valid JSON.
        """
        params = {"fields": ",".join(DATASET_FIELDS)}
        response = self._get(self.dataset_url, params=params)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(
                f"Response from {self.dataset_url} is not valid JSON: {exc}",
                source=self.dataset_url,
            ) from exc

    def fetch_bytes(self, url: str) -> bytes:
        """Fetch an absolute URL and return the raw body (used for flag images).

        Raises:
            FetchError: On network errors or non-2xx responses.
        """
        return self._get(url).content

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get(self, url: str, params: Optional[dict[str, str]] = None) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as context manager"

        get_output().debug(f"GET {url}")
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        if not response.is_success:
            body = response.text
            raise FetchError(
                f"API Error: HTTP {response.status_code}: {body}",
                url=url,
                status_code=response.status_code,
                body=body,
            )
        return response
