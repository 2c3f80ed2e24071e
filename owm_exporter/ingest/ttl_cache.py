"""Per-location TTL cache shared by concurrent scrapes."""

import threading
import time
from collections.abc import Callable

from owm_exporter.ingest.staleness import is_fresh
from owm_exporter.models.weather import CacheEntry, WeatherReading


class TtlCache:
    """Maps a target name to its latest reading and fetch time.

    The freshness window is supplied per lookup, so targets with different
    intervals share one cache. Entries are overwritten, never evicted.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    def lookup(self, name: str, interval: float) -> WeatherReading | None:
        """Return the stored reading if it is younger than ``interval`` seconds."""
        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                return None
            if is_fresh(entry.fetched_at, interval, self.clock()):
                return entry.reading
            return None

    def store(
        self, name: str, reading: WeatherReading, fetched_at: float | None = None
    ) -> None:
        if fetched_at is None:
            fetched_at = self.clock()
        entry = CacheEntry(reading=reading, fetched_at=fetched_at)
        with self._lock:
            self._entries[name] = entry

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
