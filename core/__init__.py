"""Core components of the translation engine.

This package contains the engine context, the translation cascade with its engines,
the cache with snapshot persistence, provider statistics and the conversation context stage.
"""

from core.engine_context import EngineContext

__all__: list[str] = ["EngineContext"]
