"""Translation cache package.

Provides the bounded translation cache, its snapshot persistence and single-flight
coordination of identical requests.
"""

from __future__ import annotations

from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCacheManager
from core.cache.snapshot import SnapshotStore

__all__: list[str] = ["InFlightManager", "SnapshotStore", "TranslationCacheManager"]
