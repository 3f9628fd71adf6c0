from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from models.translation_models import TranslationOutcome


__all__: list[str] = ["InFlightManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_WAIT_TIMEOUT_SEC: float = 2.0


class InFlightManager:
    """Single-flight coordination of identical requests.

    The first caller for a key becomes the producer and registers a Future; later callers
    for the same key wait on that Future instead of resolving the request again. Waiters
    that time out fall back to resolving the request themselves.

    Attributes:
        wait_timeout (float): Seconds a waiter waits for the producer's outcome.
    """

    def __init__(self, wait_timeout: float = DEFAULT_WAIT_TIMEOUT_SEC) -> None:
        self.wait_timeout: float = wait_timeout
        self._inflight: dict[str, asyncio.Future[TranslationOutcome]] = {}
        self._lock: asyncio.Lock = asyncio.Lock()
        self._is_initialized: bool = False

    @property
    def pending_keys(self) -> list[str]:
        return list(self._inflight)

    async def component_load(self) -> None:
        self._is_initialized = True
        logger.info("InFlightManager initialized")

    async def component_teardown(self) -> None:
        """Cancel pending Futures and clear the in-flight table."""
        self._is_initialized = False
        async with self._lock:
            for fut in self._inflight.values():
                if not fut.done():
                    fut.cancel()
            self._inflight.clear()
        logger.info("InFlightManager torn down and in-flight state cleared")

    async def mark_inflight_start(self, key: str | None) -> TranslationOutcome | None:
        """Register as producer, or wait for the producer already registered for the key.

        Args:
            key (str | None): Canonical request key.

        Returns:
            TranslationOutcome | None: The producer's outcome when another request is in flight,
            or None if the caller is now the producer (or the manager is inactive).

        Raises:
            TimeoutError: If waiting for the producer times out or the producer was cancelled.
        """
        if not self._is_initialized or not key:
            return None

        async with self._lock:
            fut: asyncio.Future[TranslationOutcome] | None = self._inflight.get(key)
            if fut is None:
                self._inflight[key] = asyncio.get_running_loop().create_future()
                logger.debug("Marked in-flight start for key: %s", key[:32])
                return None
            logger.debug("In-flight request detected for key: %s", key[:32])

        try:
            return await asyncio.wait_for(asyncio.shield(fut), timeout=self.wait_timeout)
        except TimeoutError:
            logger.warning("In-flight wait timed out for key: %s", key[:32])
            msg: str = f"In-flight request timed out for key: {key[:32]}"
            raise TimeoutError(msg) from None
        except asyncio.CancelledError:
            # The shared Future was cancelled by its producer; this waiter itself is still alive.
            if fut.cancelled():
                logger.warning("In-flight request cancelled for key: %s", key[:32])
                msg = f"In-flight request cancelled for key: {key[:32]}"
                raise TimeoutError(msg) from None
            raise

    async def store_inflight_result(self, key: str | None, outcome: TranslationOutcome) -> None:
        if not key:
            return
        async with self._lock:
            fut: asyncio.Future[TranslationOutcome] | None = self._inflight.pop(key, None)
            if fut is not None and not fut.done():
                fut.set_result(outcome)
                logger.debug("Set in-flight outcome for key: %s", key[:32])

    async def store_inflight_exception(self, key: str | None, exc: BaseException) -> None:
        if not key:
            return
        async with self._lock:
            fut: asyncio.Future[TranslationOutcome] | None = self._inflight.pop(key, None)
            if fut is None or fut.done():
                return
            if isinstance(exc, asyncio.CancelledError):
                fut.cancel()
            else:
                fut.set_exception(exc)
                # Mark the exception as retrieved when nobody is waiting.
                fut.exception()

    async def run(self, key: str, resolve: Callable[[], Awaitable[TranslationOutcome]]) -> TranslationOutcome:
        """Resolve a request with at most one concurrent resolution per key.

        Args:
            key (str): Canonical request key.
            resolve (Callable[[], Awaitable[TranslationOutcome]]): Coroutine factory performing the resolution.

        Returns:
            TranslationOutcome: The outcome, shared with concurrent callers of the same key.
        """
        try:
            shared: TranslationOutcome | None = await self.mark_inflight_start(key)
        except TimeoutError:
            return await resolve()
        if shared is not None:
            return shared

        try:
            outcome: TranslationOutcome = await resolve()
        except BaseException as err:
            await self.store_inflight_exception(key, err)
            raise
        await self.store_inflight_result(key, outcome)
        return outcome
