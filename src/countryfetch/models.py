"""Canonical Pydantic models shared across all countryfetch modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration** -- serialised as JSON in the user's config directory:
    :class:`Settings`.

**Dataset models** -- validated from the REST Countries response and
persisted verbatim in the cache:
    :class:`CountryName`, :class:`Currency`, :class:`Flags`,
    :class:`CapitalInfo`, :class:`Country`, :class:`FlagArt`, and
    :class:`DatasetSnapshot`.

**Display models** -- flat, display-ready projections:
    :class:`CountryRecord`.

Optional fields are ``None`` when the source omits them. Nothing fills in
a default on behalf of the data source; display code decides how an absent
value is rendered.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_BASE_URL = "https://restcountries.com/v3.1/"

DATASET_FIELDS = (
    "name",
    "capital",
    "currencies",
    "population",
    "flags",
    "languages",
    "region",
    "subregion",
    "timezones",
    "latlng",
)
"""Field projection requested from the remote endpoint, in request order."""


# --- Configuration ---


class Settings(BaseModel):
    """Process-wide settings resolved once at startup.

    Loaded by :func:`~countryfetch.config.resolve_settings` and passed
    explicitly into :class:`~countryfetch.cache.CacheStore`,
    :class:`~countryfetch.client.CountriesClient` and
    :class:`~countryfetch.sync.Synchronizer`.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Root URL of the REST Countries API"
    )
    sync_interval_days: int = Field(
        default=7, ge=0, description="Days before the cached dataset is considered stale"
    )
    cache_dir: Optional[str] = Field(
        default=None, description="Cache directory override (defaults to the XDG cache dir)"
    )
    flag_width: int = Field(
        default=40, gt=0, description="Width of rendered flag art in characters"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


# --- Dataset ---


class CountryName(BaseModel):
    """Common, official and native names of a country."""

    model_config = ConfigDict(populate_by_name=True)

    common: str
    official: Optional[str] = None
    native_name: Optional[dict[str, dict[str, str]]] = Field(
        default=None, alias="nativeName"
    )


class Currency(BaseModel):
    name: str
    symbol: Optional[str] = None


class Flags(BaseModel):
    """Flag image references by format."""

    png: Optional[str] = None
    svg: Optional[str] = None
    alt: Optional[str] = None


class CapitalInfo(BaseModel):
    latlng: Optional[list[float]] = None


class Country(BaseModel):
    """One country record as returned by the REST Countries v3.1 API.

    Only ``name`` is required. ``capital``, ``currencies`` and ``languages``
    default to empty containers because the API itself sends them empty
    (or omits them) for territories without a capital or currency.

    Example::

        Country.model_validate({
            "name": {"common": "France"},
            "capital": ["Paris"],
            "region": "Europe",
        })
    """

    model_config = ConfigDict(populate_by_name=True)

    name: CountryName
    capital: list[str] = Field(default_factory=list)
    region: Optional[str] = None
    subregion: Optional[str] = None
    population: Optional[int] = Field(default=None, ge=0)
    currencies: dict[str, Currency] = Field(default_factory=dict)
    languages: dict[str, str] = Field(default_factory=dict)
    timezones: Optional[list[str]] = None
    latlng: Optional[list[float]] = None
    tld: Optional[list[str]] = None
    capital_info: Optional[CapitalInfo] = Field(default=None, alias="capitalInfo")
    flags: Optional[Flags] = None


class FlagArt(BaseModel):
    """Rendered text block for one country's flag."""

    country_name: str
    lines: list[str] = Field(default_factory=list)


class DatasetSnapshot(BaseModel):
    """The dataset produced by one call to :meth:`~countryfetch.sync.Synchronizer.sync`.

    Attributes:
        countries: Country records in source order.
        flags: Flag art entries; empty when flag art was never generated.
        synced_at: Milliseconds since the epoch of the sync that produced
            the dataset, or ``None`` if unknown.
        fetched: ``True`` when the dataset was fetched from the network
            during this call, ``False`` when it was loaded from the cache.
    """

    countries: list[Country] = Field(default_factory=list)
    flags: list[FlagArt] = Field(default_factory=list)
    synced_at: Optional[int] = None
    fetched: bool = False

    @property
    def names(self) -> list[str]:
        """Common names in source order."""
        return [c.name.common for c in self.countries]


# --- Display ---


class CountryRecord(BaseModel):
    """Flat, display-ready projection of a :class:`Country`.

    Every field is a string; absent source values are rendered as
    :data:`~countryfetch.index.NOT_AVAILABLE`. Produced by
    :meth:`~countryfetch.index.CountryIndex.describe`.
    """

    country: str
    official_name: str
    capital: str
    latlng: str
    capital_latlng: str
    population: str
    region: str
    subregion: str
    timezones: str
    tld: str
    currencies: str
    languages: str
    flag: str
    flag_art: Optional[list[str]] = None

    def rows(self) -> list[tuple[str, str]]:
        """Label/value pairs in display order, excluding the flag art block."""
        return [
            ("Country", self.country),
            ("Official name", self.official_name),
            ("Capital", self.capital),
            ("Lat/Lng", self.latlng),
            ("Capital Lat/Lng", self.capital_latlng),
            ("Population", self.population),
            ("Region", self.region),
            ("Subregion", self.subregion),
            ("Timezones", self.timezones),
            ("TLD", self.tld),
            ("Currencies", self.currencies),
            ("Languages", self.languages),
            ("Flag", self.flag),
        ]
