from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Final

from core.trans.interface import TranslateExceptionError
from core.trans.scorer import QualityScorer
from models.translation_models import FailureKind, TranslationFailure, TranslationResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from core.cache.inflight_manager import InFlightManager
    from core.cache.manager import TranslationCacheManager
    from core.context.enhancer import ContextEnhancer
    from core.stats.collector import StatsCollector
    from core.trans.interface import Result
    from core.trans.registry import ProviderRegistry, RegisteredProvider
    from models.cache_models import CacheEntry
    from models.config_models import Cascade
    from models.translation_models import TranslationOutcome, TranslationRequest


__all__: list[str] = ["CACHE_PROVIDER", "PASSTHROUGH_PROVIDER", "UNAVAILABLE_SENTINELS", "TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

PASSTHROUGH_PROVIDER: Final[str] = "passthrough"
CACHE_PROVIDER: Final[str] = "cache"

# Matched case-insensitively against provider output.
UNAVAILABLE_SENTINELS: Final[tuple[str, ...]] = (
    "translation unavailable",
    "service unavailable",
    "temporarily unavailable",
    "mymemory warning",
    "query length limit exceeded",
)


class TransManager:
    """Sequential fallback cascade over the registered translation engines.

    A request is answered, in order, by the same-language passthrough, the cache, or the
    first engines in priority order. Every engine attempt is bounded by a timeout, scored,
    and reported to the circuit breaker. Total exhaustion is returned as a `TranslationFailure`,
    never raised.

    Attributes:
        config (Cascade): Cascade thresholds and limits.
        registry (ProviderRegistry): Ordered providers with circuit and budget state.
        cache (TranslationCacheManager): Cache of accepted translations.
        stats (StatsCollector): Observational per-provider statistics.
        enhancer (ContextEnhancer | None): Optional context stage applied to accepted translations.
        inflight (InFlightManager | None): Optional single-flight coordination per cache key.
    """

    def __init__(
        self,
        config: Cascade,
        registry: ProviderRegistry,
        cache: TranslationCacheManager,
        stats: StatsCollector,
        *,
        enhancer: ContextEnhancer | None = None,
        inflight: InFlightManager | None = None,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.config: Cascade = config
        self.registry: ProviderRegistry = registry
        self.cache: TranslationCacheManager = cache
        self.stats: StatsCollector = stats
        self.enhancer: ContextEnhancer | None = enhancer
        self.inflight: InFlightManager | None = inflight
        self._timer: Callable[[], float] = timer

    @staticmethod
    def is_unavailable_response(text: str) -> bool:
        """Check whether a provider response is empty or an "unavailable" notice instead of a translation."""
        if not text.strip():
            return True
        lowered: str = text.casefold()
        return any(sentinel in lowered for sentinel in UNAVAILABLE_SENTINELS)

    def _finalize(self, result: TranslationResult, request: TranslationRequest) -> TranslationResult:
        if self.enhancer is None:
            return result
        return self.enhancer.enhance(result, request)

    def fetch_cached_translation(self, request: TranslationRequest) -> TranslationResult | None:
        """Look up the cache and wrap a hit as a result with the stored quality as score."""
        key: str = request.cache_key
        translation, found = self.cache.get(key)
        if not found:
            return None
        entry: CacheEntry | None = self.cache.peek(key)
        score: float = entry.quality if entry is not None else 0.0
        return TranslationResult(text=translation, provider=CACHE_PROVIDER, score=score)

    async def translate(self, request: TranslationRequest) -> TranslationOutcome:
        """Resolve a translation request.

        Args:
            request (TranslationRequest): Text with source and target language codes.

        Returns:
            TranslationOutcome: The accepted translation, or a failure carrying the original text.
        """
        logger.debug("Translation requested: %s", request)

        if request.is_same_language or not request.text.strip():
            logger.debug("Same language or empty text, returning input unchanged")
            return TranslationResult(text=request.text, provider=PASSTHROUGH_PROVIDER, score=1.0)

        cached: TranslationResult | None = self.fetch_cached_translation(request)
        if cached is not None:
            logger.debug("Translation cache hit: '%s'", cached.text[:50])
            return self._finalize(cached, request)

        if self.inflight is not None:
            return await self.inflight.run(request.cache_key, lambda: self._resolve(request))
        return await self._resolve(request)

    async def _resolve(self, request: TranslationRequest) -> TranslationOutcome:
        best: TranslationResult | None = await self.run_cascade(request)
        if best is None:
            logger.error("All translation engines failed for '%s'", request.text[:50])
            return TranslationFailure(original_text=request.text)

        self.cache.put(request.cache_key, best.text, best.score)
        self.stats.record_success(best.provider, best.latency_ms)
        logger.info("Translation accepted from '%s' (score %.2f)", best.provider, best.score)
        return self._finalize(best, request)

    async def run_cascade(self, request: TranslationRequest) -> TranslationResult | None:
        """Attempt candidates in priority order and return the best scored result, if any."""
        candidates: list[RegisteredProvider] = self.registry.candidates(self.config.MAX_ATTEMPTS)
        if not candidates:
            logger.warning("No translation engine is currently available")
            return None

        best: TranslationResult | None = None
        for provider in candidates:
            result: TranslationResult | None = await self.attempt(provider, request)
            if result is None:
                continue
            if best is None or result.score > best.score:
                best = result
            if result.score > self.config.EARLY_ACCEPT_SCORE:
                logger.debug("Early accept from '%s' (score %.2f)", provider.name, result.score)
                break
        return best

    def _record_failure(self, provider: RegisteredProvider, kind: FailureKind) -> None:
        self.registry.record_failure(provider, kind)
        self.stats.record_failure(provider.name)

    async def attempt(self, provider: RegisteredProvider, request: TranslationRequest) -> TranslationResult | None:
        """Call one engine under the attempt timeout and score its output.

        Returns:
            TranslationResult | None: The scored result, or None when the attempt counts as a failure.
        """
        name: str = provider.name
        self.registry.consume_budget(name)
        started: float = self._timer()
        try:
            response: Result = await asyncio.wait_for(
                provider.engine.translation(
                    content=request.text, tgt_lang=request.target_lang, src_lang=request.source_lang
                ),
                timeout=self.config.ATTEMPT_TIMEOUT,
            )
        except TimeoutError:
            logger.warning("Translation engine '%s' timed out after %.1f sec", name, self.config.ATTEMPT_TIMEOUT)
            self._record_failure(provider, FailureKind.GENERIC)
            return None
        except TranslateExceptionError as err:
            kind: FailureKind = self.registry.classify_failure(provider, err)
            if kind is FailureKind.RATE_LIMIT:
                logger.warning("Translation engine '%s' rate limited: %s", name, err)
            else:
                logger.warning("Translation engine '%s' failed: %s", name, err)
            self._record_failure(provider, kind)
            return None
        except Exception:
            logger.exception("Translation engine '%s' failed with unexpected error.", name)
            self._record_failure(provider, FailureKind.GENERIC)
            return None

        latency_ms: int = int((self._timer() - started) * 1000)
        text: str = StringUtils.ensure_str(response.text).strip()
        if self.is_unavailable_response(text):
            logger.warning("Translation engine '%s' returned an unusable response: '%s'", name, text[:50])
            self._record_failure(provider, FailureKind.GENERIC)
            return None

        self.registry.record_success(provider)
        score: float = QualityScorer.score(provider.descriptor.base_quality, latency_ms, text)
        logger.debug("Engine '%s' answered in %d ms (score %.2f)", name, latency_ms, score)
        return TranslationResult(text=text, provider=name, score=score, latency_ms=latency_ms)

    async def close(self) -> None:
        logger.info("Class '%s' termination process started.", self.__class__.__name__)
        await self.registry.close()
        logger.info("Class '%s' termination process completed.", self.__class__.__name__)
