"""Conversation context stage applied to accepted translations."""

from __future__ import annotations

from core.context.enhancer import ContextEnhancer, ContextMessage

__all__: list[str] = ["ContextEnhancer", "ContextMessage"]
