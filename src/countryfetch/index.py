"""In-memory lookups over a synced dataset.

:class:`CountryIndex` answers the CLI's questions: which country a name
refers to, which country a capital belongs to, which countries lie in a
region, and how a country is displayed. Every lookup scans the dataset in
source order and returns the first hit, so duplicate names always resolve
to the same record.
"""

from __future__ import annotations

import random
from typing import Optional

from countryfetch.exceptions import EmptyDatasetError, InvalidUsageError, NotFoundError
from countryfetch.models import Country, CountryRecord, DatasetSnapshot

NOT_AVAILABLE = "N/A"
"""Marker rendered for every field the source left out."""

FLAG_DISPLAYED = "Displayed"
FLAG_NOT_AVAILABLE = "Not Available"

_SEPARATOR = " | "


class CountryIndex:
    """Name, capital and region lookups over a :class:`DatasetSnapshot`.

    Args:
        snapshot: The dataset returned by
            :meth:`~countryfetch.sync.Synchronizer.sync`.
    """

    def __init__(self, snapshot: DatasetSnapshot) -> None:
        self._countries = list(snapshot.countries)
        self._names = [c.name.common for c in self._countries]
        self._flag_art: dict[str, list[str]] = {}
        for art in snapshot.flags:
            # First entry wins, as with duplicate country names.
            self._flag_art.setdefault(art.country_name, art.lines)

    def __len__(self) -> int:
        return len(self._countries)

    @property
    def countries(self) -> list[Country]:
        return list(self._countries)

    @property
    def names(self) -> list[str]:
        """Common names in source order."""
        return list(self._names)

    def find_by_name(self, query: str) -> Country:
        """Resolve *query* to a country, exact match first, then substring.

        Both passes compare lowercased common names and return the first
        match in dataset order.

        Raises:
            NotFoundError: If neither pass matches.
        """
        needle = query.lower()
        for country in self._countries:
            if country.name.common.lower() == needle:
                return country
        for country in self._countries:
            if needle in country.name.common.lower():
                return country
        raise NotFoundError(query, kind="name")

    def find_by_capital(self, capital: str) -> Country:
        """Return the first country listing *capital* among its capitals.

        The comparison is case-insensitive and exact per city; a partial
        city name never matches.

        Raises:
            InvalidUsageError: If *capital* is empty.
            NotFoundError: If no country lists that capital.
        """
        if not capital:
            raise InvalidUsageError("Must provide a capital name.")
        needle = capital.lower()
        for country in self._countries:
            if any(city.lower() == needle for city in country.capital):
                return country
        raise NotFoundError(capital, kind="capital")

    def filter_by_region(self, region: str) -> list[Country]:
        """Countries whose region equals *region* exactly (case-sensitive)."""
        return [c for c in self._countries if c.region == region]

    def regions(self) -> list[str]:
        """Distinct regions in order of first appearance."""
        seen: dict[str, None] = {}
        for country in self._countries:
            if country.region is not None:
                seen.setdefault(country.region, None)
        return list(seen)

    def random_name(self, rng: Optional[random.Random] = None) -> str:
        """Pick one common name uniformly at random.

        Args:
            rng: Optional random generator, for reproducible picks.

        Raises:
            EmptyDatasetError: If the dataset has no countries.
        """
        if not self._names:
            raise EmptyDatasetError("Cannot pick a random country from an empty dataset")
        return (rng or random).choice(self._names)

    def flag_art_for(self, country: Country) -> Optional[list[str]]:
        return self._flag_art.get(country.name.common)

    def describe(self, country: Country) -> CountryRecord:
        """Project *country* into a flat, display-ready record.

        Absent optional fields become :data:`NOT_AVAILABLE`. Currency and
        language mappings are sorted by ISO code before being joined so
        the output does not depend on the source's key order.
        """
        art = self.flag_art_for(country)
        capital_latlng = (
            country.capital_info.latlng if country.capital_info is not None else None
        )
        return CountryRecord(
            country=country.name.common,
            official_name=country.name.official or NOT_AVAILABLE,
            capital=_join(country.capital),
            latlng=_join_coords(country.latlng),
            capital_latlng=_join_coords(capital_latlng),
            population=(
                f"{country.population:,}" if country.population is not None else NOT_AVAILABLE
            ),
            region=country.region or NOT_AVAILABLE,
            subregion=country.subregion or NOT_AVAILABLE,
            timezones=_join(country.timezones),
            tld=_join(country.tld),
            currencies=_join(
                f"{country.currencies[code].name} ({code})"
                for code in sorted(country.currencies)
            ),
            languages=_join(country.languages[code] for code in sorted(country.languages)),
            flag=FLAG_DISPLAYED if art else FLAG_NOT_AVAILABLE,
            flag_art=art,
        )


def _join(values) -> str:
    items = list(values) if values is not None else []
    return _SEPARATOR.join(items) if items else NOT_AVAILABLE


def _join_coords(coords: Optional[list[float]]) -> str:
    if not coords:
        return NOT_AVAILABLE
    return "/".join(f"{c:g}" for c in coords)
