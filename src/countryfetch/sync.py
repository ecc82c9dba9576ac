"""Dataset synchronisation: decide between the cache and the network.

:class:`Synchronizer` owns the staleness policy. A sync re-fetches the
bulk dataset when the cache is stale (no ``last-synced`` marker, no
``countries.json``, or a marker older than the configured interval) or
when forced; otherwise it loads the cached dataset.

A refresh persists in a fixed order:

1. ``countries.json`` -- the validated dataset.
2. ``last-synced.txt`` -- the timestamp, written last so it acts as the
   commit marker. An interrupted refresh leaves either no marker or the
   previous one, never a marker pointing at a half-written dataset.
3. ``flags.json`` -- only when flag art was requested, and only after
   the two writes above, so a failure while rendering flags never
   invalidates the base dataset. An unreadable ``flags.json`` is logged
   and treated as absent.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from countryfetch.cache import JSON_SUFFIX, CacheStore
from countryfetch.exceptions import (
    CorruptCacheError,
    FetchError,
    InvalidUsageError,
    ParseError,
)
from countryfetch.models import Country, DatasetSnapshot, FlagArt, Settings

logger = logging.getLogger(__name__)

COUNTRIES_KEY = "countries"
FLAGS_KEY = "flags"
LAST_SYNCED_KEY = "last-synced"

MS_PER_DAY = 24 * 60 * 60 * 1000

# Alternate raster suffix tried when the png flag cannot be used. Pillow
# cannot decode svg, so svg-only flags are skipped like missing ones.
FALLBACK_SUFFIXES = {".png": ".jpg"}

FLAG_ART_TITLE = "Generating ASCII art for each country flag. This may take a minute..."

_countries_adapter = TypeAdapter(list[Country])
_flags_adapter = TypeAdapter(list[FlagArt])


class DatasetSource(Protocol):
    def fetch_countries(self) -> Any: ...  # noqa: ANN401


class ImageRenderer(Protocol):
    def render(self, image_url: str) -> list[str]: ...


class SyncReporter(Protocol):
    """One-way sink for sync progress.

    :class:`~countryfetch.output.OutputManager` implements it. Failures
    raised by a reporter are logged and never abort a sync.
    """

    def alert(self, title: str, detail: str = "") -> None: ...

    def success(self, message: str) -> None: ...

    def step(self, current: int, total: int, title: str = "", description: str = "") -> None: ...


class Synchronizer:
    """Keep the local dataset in step with the remote endpoint.

    Args:
        settings: Resolved settings; ``sync_interval_days`` drives staleness.
        store: Cache store holding the dataset, flags and marker.
        source: Object with a ``fetch_countries()`` method returning the
            decoded JSON body, usually a
            :class:`~countryfetch.client.CountriesClient`.
        renderer: Flag image renderer. Required only for syncs that
            request flag art.
        reporter: Optional progress sink.
        clock: Returns the current time in seconds since the epoch.
            Defaults to :func:`time.time`.

    Example::

        with CountriesClient(settings) as client:
            sync = Synchronizer(settings, store, client, reporter=get_output())
            snapshot = sync.sync()
    """

    def __init__(
        self,
        settings: Settings,
        store: CacheStore,
        source: DatasetSource,
        renderer: Optional[ImageRenderer] = None,
        reporter: Optional[SyncReporter] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._source = source
        self._renderer = renderer
        self._reporter = reporter
        self._clock = clock or time.time
        self._snapshot: Optional[DatasetSnapshot] = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def snapshot(self) -> Optional[DatasetSnapshot]:
        """The snapshot produced by the most recent :meth:`sync`, if any."""
        return self._snapshot

    @property
    def names(self) -> list[str]:
        """Common names of the synced dataset in source order."""
        if self._snapshot is None:
            return []
        return self._snapshot.names

    @property
    def interval_ms(self) -> int:
        return self._settings.sync_interval_days * MS_PER_DAY

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def last_synced(self) -> Optional[int]:
        """Return the last successful sync time in milliseconds, or ``None``.

        An unreadable marker is treated like a missing one so that the
        next sync repairs it.
        """
        raw = self._store.read_text(LAST_SYNCED_KEY)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Ignoring unreadable %s marker: %r", LAST_SYNCED_KEY, raw)
            return None

    def is_stale(self) -> bool:
        """Return ``True`` when the cached dataset must be re-fetched."""
        last = self.last_synced()
        if last is None or not self._store.exists(COUNTRIES_KEY, JSON_SUFFIX):
            return True
        return self.now_ms() - last > self.interval_ms

    def sync(self, force: bool = False, with_flag_art: bool = False) -> DatasetSnapshot:
        """Return the dataset, re-fetching it when stale or forced.

        Args:
            force: Re-fetch regardless of the last-synced marker.
            with_flag_art: Render flag art for every country after the
                dataset is persisted. Only applies when a fetch happens.

        Raises:
            FetchError: The endpoint was unreachable or returned non-2xx.
            ParseError: The remote or cached payload had the wrong shape.
            CorruptCacheError: The cache is fresh but ``countries.json``
                is missing or unreadable.
            InvalidUsageError: Flag art was requested without a renderer.
        """
        if with_flag_art and self._renderer is None:
            raise InvalidUsageError("Flag art requested but no image renderer is configured")

        if force or self.is_stale():
            snapshot = self._refresh(force, with_flag_art)
        else:
            snapshot = self._load_cached()
        self._snapshot = snapshot
        return snapshot

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _refresh(self, force: bool, with_flag_art: bool) -> DatasetSnapshot:
        detail = "" if force else (
            f"\nThis will only happen every {self._settings.sync_interval_days} days"
        )
        self._report("alert", "Synchronizing countries database...", detail)

        raw = self._source.fetch_countries()
        countries = _parse_countries(raw, source="remote dataset")

        self._store.save_json(
            COUNTRIES_KEY,
            [c.model_dump(mode="json", by_alias=True, exclude_none=True) for c in countries],
        )
        synced_at = self.now_ms()
        self._store.save_text(LAST_SYNCED_KEY, str(synced_at))
        logger.info("Persisted %d countries (synced_at=%d)", len(countries), synced_at)

        if with_flag_art:
            flags = self._generate_flag_art(countries)
            self._store.save_json(FLAGS_KEY, [f.model_dump(mode="json") for f in flags])
        else:
            flags = self._load_flags()

        self._report(
            "success", f"Synced successfully: cache saved at {self._store.directory}"
        )
        return DatasetSnapshot(
            countries=countries, flags=flags, synced_at=synced_at, fetched=True
        )

    def _load_cached(self) -> DatasetSnapshot:
        raw = self._store.read_json(COUNTRIES_KEY)
        if raw is None:
            raise CorruptCacheError(
                "Cache is marked as fresh but countries.json is missing", key=COUNTRIES_KEY
            )
        countries = _parse_countries(raw, source=COUNTRIES_KEY)
        return DatasetSnapshot(
            countries=countries,
            flags=self._load_flags(),
            synced_at=self.last_synced(),
            fetched=False,
        )

    def _load_flags(self) -> list[FlagArt]:
        """Load cached flag art; an unusable ``flags.json`` counts as absent.

        Flag art is optional, so a damaged table is logged and ignored
        rather than blocking lookups against the base dataset.
        """
        try:
            raw = self._store.read_json(FLAGS_KEY)
        except CorruptCacheError as exc:
            logger.warning("Ignoring unreadable flag art cache: %s", exc)
            return []
        if raw is None:
            return []
        try:
            return _flags_adapter.validate_python(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring flag art cache with an unexpected shape: %d error(s)",
                exc.error_count(),
            )
            return []

    def _generate_flag_art(self, countries: list[Country]) -> list[FlagArt]:
        assert self._renderer is not None

        total = len(countries)
        flags: list[FlagArt] = []
        for index, country in enumerate(countries, start=1):
            urls = flag_urls(country)
            if urls:
                lines = self._render_first(urls)
                flags.append(FlagArt(country_name=country.name.common, lines=lines))
            self._report(
                "step", index, total, FLAG_ART_TITLE,
                f"Generating a flag for {country.name.common}",
            )
        return flags

    def _render_first(self, urls: list[str]) -> list[str]:
        """Render the first usable image in *urls*; the last failure propagates."""
        assert self._renderer is not None

        for url, fallback in zip(urls, urls[1:]):
            try:
                return self._renderer.render(url)
            except (FetchError, ParseError) as exc:
                logger.warning("Flag image %s unusable (%s); trying %s", url, exc, fallback)
        return self._renderer.render(urls[-1])

    def _report(self, method: str, *args: Any) -> None:
        if self._reporter is None:
            return
        try:
            getattr(self._reporter, method)(*args)
        except Exception as exc:
            logger.warning("Progress reporter failed in %s(): %s", method, exc)


def flag_urls(country: Country) -> list[str]:
    """Return candidate raster flag URLs for *country*, preferred first.

    The png URL comes first, followed by its :data:`FALLBACK_SUFFIXES`
    sibling. Empty when the country has no png flag.
    """
    if country.flags is None or not country.flags.png:
        return []
    url = country.flags.png
    urls = [url]
    for suffix, alternate in FALLBACK_SUFFIXES.items():
        if url.endswith(suffix):
            urls.append(url[: -len(suffix)] + alternate)
    return urls


def _parse_countries(raw: Any, source: str) -> list[Country]:  # noqa: ANN401
    if not isinstance(raw, list):
        raise ParseError(
            f"Expected a JSON array of countries from {source}, got {type(raw).__name__}",
            source=source,
        )
    try:
        return _countries_adapter.validate_python(raw)
    except ValidationError as exc:
        raise ParseError(
            f"Country data from {source} has an unexpected shape: "
            f"{exc.error_count()} error(s), first: {exc.errors()[0]['msg']}",
            source=source,
        ) from exc
