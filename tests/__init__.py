"""Unit tests for the translation engine.

This package contains test modules for all components of the translation engine.
Tests use pytest with asyncio support and mock HTTP/network calls via monkeypatch.
"""
