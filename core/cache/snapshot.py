"""Best-effort persistence of the translation cache.

The snapshot is a JSON array of `{"key": ..., "entry": {...}}` records in cache order.
I/O failures are logged and never reach the translation path.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import time
from typing import TYPE_CHECKING, ClassVar, Final

from models.cache_models import CacheEntry, SnapshotRecord
from utils.file_utils import FileUtils, FileUtilsError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from pathlib import Path

    from core.cache.manager import TranslationCacheManager

__all__: list[str] = ["SnapshotStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SNAPSHOT_MAX_AGE_SEC: Final[int] = 7 * 24 * 3600


class SnapshotStore:
    """Load, save and periodically persist a `TranslationCacheManager`.

    Attributes:
        MAX_AGE_SEC (ClassVar[int]): Entries created longer ago than this are dropped on load.
    """

    MAX_AGE_SEC: ClassVar[int] = SNAPSHOT_MAX_AGE_SEC

    def __init__(
        self,
        path: Path | None,
        cache: TranslationCacheManager,
        *,
        interval: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path: Path | None = path
        self.cache: TranslationCacheManager = cache
        self.interval: float = interval
        self._clock: Callable[[], float] = clock
        self._periodic_task: asyncio.Task[None] | None = None
        self._pending_saves: set[asyncio.Task[bool]] = set()
        self._save_lock: asyncio.Lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def _read_records(self) -> list[SnapshotRecord]:
        if self.path is None or not self.path.exists():
            return []
        FileUtils.check_file_status(self.path)
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            msg = "snapshot root is not a list"
            raise ValueError(msg)
        return [SnapshotRecord.from_dict(item) for item in raw]

    def load(self) -> int:
        """Restore the cache from the snapshot file, dropping entries older than `MAX_AGE_SEC`.

        Returns:
            int: Number of entries restored. 0 when the file is missing or unreadable.
        """
        if self.path is None:
            return 0
        try:
            records: list[SnapshotRecord] = self._read_records()
        except (OSError, ValueError, TypeError, KeyError, FileUtilsError) as err:
            logger.warning("Failed to load cache snapshot '%s': %s", self.path, err)
            return 0

        now: float = self._clock()
        fresh: list[tuple[str, CacheEntry]] = [
            (record.key, record.entry) for record in records if now - record.entry.created_at <= self.MAX_AGE_SEC
        ]
        loaded: int = self.cache.restore(fresh)
        logger.info(
            "Cache snapshot loaded: %d entries restored, %d discarded as stale",
            loaded,
            len(records) - len(fresh),
        )
        return loaded

    def serialize(self) -> str:
        records: list[SnapshotRecord] = [SnapshotRecord(key=key, entry=entry) for key, entry in self.cache.entries()]
        return json.dumps([record.to_dict() for record in records], ensure_ascii=False)

    def save(self) -> bool:
        """Write the snapshot synchronously.

        Returns:
            bool: True if the file was written.
        """
        if self.path is None:
            return False
        try:
            FileUtils.write_text_atomic(self.path, self.serialize())
        except (OSError, FileUtilsError) as err:
            logger.warning("Failed to save cache snapshot '%s': %s", self.path, err)
            return False
        logger.debug("Cache snapshot saved: %s (%d entries)", self.path, len(self.cache))
        return True

    async def save_async(self) -> bool:
        """Write the snapshot in a worker thread. Concurrent saves are serialized."""
        if self.path is None:
            return False
        async with self._save_lock:
            # Serialize on the loop thread so the cache is not iterated while being mutated.
            payload: str = self.serialize()
            try:
                await asyncio.to_thread(FileUtils.write_text_atomic, self.path, payload)
            except (OSError, FileUtilsError) as err:
                logger.warning("Failed to save cache snapshot '%s': %s", self.path, err)
                return False
        logger.debug("Cache snapshot saved: %s", self.path)
        return True

    def schedule_save(self) -> None:
        """Start a fire-and-forget save task.

        Raises:
            RuntimeError: If no event loop is running.
        """
        if self.path is None:
            return
        task: asyncio.Task[bool] = asyncio.get_running_loop().create_task(self.save_async(), name="cache_snapshot")
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def _periodic_save_loop(self) -> None:
        logger.debug("Starting periodic snapshot task (interval: %.0f sec)", self.interval)
        while True:
            await asyncio.sleep(self.interval)
            await self.save_async()

    async def component_load(self) -> None:
        """Load the snapshot and start the periodic saver."""
        self.load()
        if self.path is not None and self._periodic_task is None:
            self._periodic_task = asyncio.create_task(self._periodic_save_loop(), name="cache_snapshot_periodic")
        self.cache.set_snapshot_hook(self.schedule_save)

    async def component_teardown(self) -> None:
        """Stop the periodic saver, wait for pending saves and write a final snapshot."""
        self.cache.set_snapshot_hook(None)
        if self._periodic_task is not None:
            self._periodic_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._periodic_task
            self._periodic_task = None
        if self._pending_saves:
            await asyncio.gather(*self._pending_saves, return_exceptions=True)
        await self.save_async()
