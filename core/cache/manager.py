"""Translation cache manager.

Bounded in-memory cache of accepted translations keyed by canonical request key.
Entries expire by popularity-dependent TTL on read and are evicted by usage rank when
the cache grows past its capacity.
"""

from __future__ import annotations

import random
import time
from collections import Counter
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar, Final

from models.cache_models import CacheEntry, CacheStatistics
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from models.config_models import Cache

__all__: list[str] = ["TranslationCacheManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SECONDS_PER_HOUR: Final[int] = 3600
SECONDS_PER_DAY: Final[int] = 24 * SECONDS_PER_HOUR

# Denominator floor for the eviction rank, so that entries used this very second stay finite.
MIN_RANK_AGE_SEC: Final[float] = 1.0


class TranslationCacheManager:
    """Bounded cache of accepted translations.

    `get` and `put` never raise. A hit refreshes `use_count` and `last_used_at`; an entry
    whose age (from `created_at`) reached its TTL is deleted on read and reported as a miss.

    Attributes:
        POPULAR_USE_COUNT (ClassVar[int]): Entries used more often than this get the long TTL.
        TTL_POPULAR_SEC (ClassVar[int]): TTL of popular entries (7 days).
        TTL_DEFAULT_SEC (ClassVar[int]): TTL of other entries (24 hours).
    """

    POPULAR_USE_COUNT: ClassVar[int] = 5
    TTL_POPULAR_SEC: ClassVar[int] = 7 * SECONDS_PER_DAY
    TTL_DEFAULT_SEC: ClassVar[int] = SECONDS_PER_DAY

    def __init__(
        self,
        capacity: int = 1000,
        retention: int = 800,
        *,
        snapshot_probability: float = 0.1,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
    ) -> None:
        if not 0 < retention <= capacity:
            msg: str = f"Retention must satisfy 0 < retention <= capacity (retention={retention}, capacity={capacity})"
            raise ValueError(msg)
        self.capacity: int = capacity
        self.retention: int = retention
        self.snapshot_probability: float = snapshot_probability
        self._clock: Callable[[], float] = clock
        self._rng: Callable[[], float] = rng
        self._entries: dict[str, CacheEntry] = {}
        self._snapshot_hook: Callable[[], None] | None = None
        self.hits: int = 0
        self.misses: int = 0
        self.evicted: int = 0
        logger.debug("TranslationCacheManager created (capacity=%d, retention=%d)", capacity, retention)

    @classmethod
    def from_config(
        cls,
        config: Cache,
        *,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
    ) -> TranslationCacheManager:
        return cls(
            config.CAPACITY,
            config.RETENTION,
            snapshot_probability=config.SNAPSHOT_PROBABILITY,
            clock=clock,
            rng=rng,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def set_snapshot_hook(self, hook: Callable[[], None] | None) -> None:
        """Register the callable scheduling a snapshot save after some `put` calls."""
        self._snapshot_hook = hook

    def ttl_for(self, entry: CacheEntry) -> int:
        return self.TTL_POPULAR_SEC if entry.use_count > self.POPULAR_USE_COUNT else self.TTL_DEFAULT_SEC

    def is_expired(self, entry: CacheEntry, now: float | None = None) -> bool:
        now = self._clock() if now is None else now
        return now - entry.created_at >= self.ttl_for(entry)

    def get(self, key: str) -> tuple[str, bool]:
        """Look up a translation.

        Args:
            key (str): Canonical request key.

        Returns:
            tuple[str, bool]: The translation and True on a hit, ("", False) otherwise.
        """
        entry: CacheEntry | None = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return "", False

        now: float = self._clock()
        if self.is_expired(entry, now):
            del self._entries[key]
            self.misses += 1
            logger.debug("Cache entry expired: %s", key[:48])
            return "", False

        entry.use_count += 1
        entry.last_used_at = now
        self.hits += 1
        logger.debug("Cache hit (uses: %d): %s", entry.use_count, key[:48])
        return entry.translation, True

    def peek(self, key: str) -> CacheEntry | None:
        """Return the stored entry without bookkeeping or expiry."""
        return self._entries.get(key)

    def put(self, key: str, translation: str, quality: float) -> None:
        """Insert or overwrite a translation, evicting down to `retention` when over capacity."""
        now: float = self._clock()
        self._entries[key] = CacheEntry(
            translation=translation,
            quality=min(1.0, max(0.0, quality)),
            created_at=now,
            last_used_at=now,
            use_count=0,
        )
        logger.debug("Cache put: %s", key[:48])

        if len(self._entries) > self.capacity:
            self._evict(now)

        if self._snapshot_hook is not None and self._rng() < self.snapshot_probability:
            try:
                self._snapshot_hook()
            except RuntimeError as err:
                logger.debug("Snapshot not scheduled: %s", err)

    def rank(self, entry: CacheEntry, now: float) -> float:
        """Eviction rank: uses per second since last use. Higher ranks are kept."""
        return entry.use_count / max(now - entry.last_used_at, MIN_RANK_AGE_SEC)

    def _evict(self, now: float) -> None:
        ordered: list[tuple[str, CacheEntry]] = sorted(
            self._entries.items(),
            key=lambda item: (self.rank(item[1], now), item[1].use_count, item[1].last_used_at),
            reverse=True,
        )
        dropped: int = len(ordered) - self.retention
        self._entries = dict(ordered[: self.retention])
        self.evicted += dropped
        logger.info("Cache eviction: dropped %d entries, %d retained", dropped, len(self._entries))

    def entries(self) -> list[tuple[str, CacheEntry]]:
        """Ordered `(key, entry)` pairs for persistence."""
        return list(self._entries.items())

    def restore(self, pairs: Iterable[tuple[str, CacheEntry]]) -> int:
        """Load `(key, entry)` pairs. TTL still applies on read.

        Returns:
            int: Number of entries loaded.
        """
        loaded: int = 0
        for key, entry in pairs:
            self._entries[key] = entry
            loaded += 1
        if len(self._entries) > self.capacity:
            self._evict(self._clock())
        return loaded

    def clear(self) -> None:
        self._entries.clear()

    def get_cache_statistics(self) -> CacheStatistics:
        if not self._entries:
            return CacheStatistics(capacity=self.capacity, retention=self.retention)

        created: list[float] = [entry.created_at for entry in self._entries.values()]
        return CacheStatistics(
            total_entries=len(self._entries),
            total_hits=sum(entry.use_count for entry in self._entries.values()),
            hit_distribution=dict(sorted(Counter(entry.use_count for entry in self._entries.values()).items())),
            oldest_entry=min(created),
            newest_entry=max(created),
            capacity=self.capacity,
            retention=self.retention,
        )

    def export_cache_detailed(self, output_path: Path) -> bool:
        """Export cache entries to a text file sorted by use count.

        Returns:
            bool: True if the export succeeded.
        """
        ordered: list[tuple[str, CacheEntry]] = sorted(
            self._entries.items(), key=lambda item: (item[1].use_count, item[1].last_used_at), reverse=True
        )
        try:
            with output_path.open("w", encoding="utf-8") as f:
                f.write("Translation Cache Detailed Export\n")
                f.write("=" * 80 + "\n\n")
                for key, entry in ordered:
                    f.write(f"Cache Key: {key}\n")
                    f.write(f"Translation: {entry.translation}\n")
                    f.write(f"Quality: {entry.quality:.2f}\n")
                    f.write(f"Use Count: {entry.use_count}\n")
                    f.write(f"Created: {datetime.fromtimestamp(entry.created_at, tz=UTC).isoformat()}\n")
                    f.write(f"Last Used: {datetime.fromtimestamp(entry.last_used_at, tz=UTC).isoformat()}\n")
                    f.write("-" * 80 + "\n")
        except OSError as err:
            logger.error("Error exporting cache data: %s", err)
            return False

        logger.info("Cache data exported to: %s", output_path)
        return True
