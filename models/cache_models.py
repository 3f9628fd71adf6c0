"""Models for translation cache data.

Defines the cache entry stored per canonical key, the snapshot record used for
persistence, and the cache statistics summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "CacheEntry",
    "CacheStatistics",
    "SnapshotRecord",
]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class CacheEntry(DataClassJsonMixin):
    """Translation cache entry data.

    Timestamps are POSIX seconds taken from the cache clock.

    Attributes:
        translation (str): Translated text.
        quality (float): Score of the accepted translation (0.0 to 1.0).
        created_at (float): Entry creation timestamp.
        last_used_at (float): Last usage timestamp.
        use_count (int): Number of cache hits.
    """

    translation: str
    quality: float
    created_at: float
    last_used_at: float
    use_count: int = 0


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class SnapshotRecord(DataClassJsonMixin):
    """One `(key, entry)` pair as written to the snapshot file."""

    key: str
    entry: CacheEntry


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        total_entries (int): Total number of cache entries.
        total_hits (int): Total cache hits across all entries.
        hit_distribution (dict[int, int]): Distribution of entries by use count (use_count -> entries).
        oldest_entry (float | None): Creation timestamp of the oldest entry.
        newest_entry (float | None): Creation timestamp of the newest entry.
        capacity (int): Configured capacity.
        retention (int): Size the cache is trimmed to on eviction.
    """

    total_entries: int = 0
    total_hits: int = 0
    hit_distribution: dict[int, int] = field(default_factory=dict)
    oldest_entry: float | None = None
    newest_entry: float | None = None
    capacity: int = 0
    retention: int = 0
