"""Coordinate to timezone resolution."""

import math
import threading
from collections import OrderedDict
from typing import Optional, Protocol, Tuple
import structlog

from ..models.config import ResolverConfig

logger = structlog.get_logger()


class TimezoneResolver(Protocol):
    """Anything that maps a coordinate to an IANA timezone identifier."""

    def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        ...


def valid_coordinates(latitude: Optional[float], longitude: Optional[float]) -> bool:
    """Check that a latitude/longitude pair is present and in range."""
    if latitude is None or longitude is None:
        return False
    if math.isnan(latitude) or math.isnan(longitude):
        return False
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


class CoordinateTimezoneResolver:
    """Resolves coordinates with the timezone-boundary polygons of timezonefinder.

    Points in international waters resolve to None. Lookups are memoised in
    a small LRU cache shared by all worker threads.
    """

    def __init__(self, config: Optional[ResolverConfig] = None, finder=None):
        """Initialize the resolver."""
        self.config = config or ResolverConfig()
        if finder is None:
            from timezonefinder import TimezoneFinder
            finder = TimezoneFinder(in_memory=True)
        self._finder = finder
        self._cache: OrderedDict[Tuple[float, float], Optional[str]] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
        }

    def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        """Get the IANA timezone for a coordinate, or None."""
        if not valid_coordinates(latitude, longitude):
            return None

        key = (latitude, longitude)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self._stats["hits"] += 1
                return self._cache[key]

            self._stats["misses"] += 1

        # In-memory TimezoneFinder lookups are safe to run concurrently
        timezone_id = self._finder.timezone_at_land(lng=longitude, lat=latitude)

        with self._lock:
            self._cache[key] = timezone_id
            self._cache.move_to_end(key)
            if len(self._cache) > self.config.cache_size:
                self._cache.popitem(last=False)
                self._stats["evictions"] += 1

        if timezone_id is None:
            logger.debug("No timezone for coordinates", lat=latitude, lon=longitude)
        return timezone_id

    def get_stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            return dict(self._stats, size=len(self._cache))
