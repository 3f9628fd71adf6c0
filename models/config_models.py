"""Configuration data models for the translation engine.

Each data class maps one INI section. Field names match the INI keys, and the
field defaults are the values used when a key is absent from the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Cascade",
    "Circuit",
    "Config",
    "Context",
    "General",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    # Each item: {"name": str, "priority": int, "quality": float, "budget": int}
    PROVIDERS: list[dict[str, str | int | float]] = field(default_factory=list)
    GOOGLE_SUFFIX: str = "com"


@dataclass
class Cascade:
    EARLY_ACCEPT_SCORE: float = 0.8
    MAX_ATTEMPTS: int = 5
    ATTEMPT_TIMEOUT: float = 8.0
    SINGLE_FLIGHT: bool = False


@dataclass
class Circuit:
    GENERIC_COOLDOWN: float = 60.0
    RATE_LIMIT_COOLDOWN: float = 3600.0
    ESCALATE: bool = False
    MAX_COOLDOWN: float = 7200.0


@dataclass
class Cache:
    CAPACITY: int = 1000
    RETENTION: int = 800
    SNAPSHOT_PATH: str = ""
    SNAPSHOT_INTERVAL: float = 300.0
    SNAPSHOT_PROBABILITY: float = 0.1


@dataclass
class Context:
    ENABLED: bool = True
    WINDOW_SIZE: int = 50


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    CASCADE: Cascade = field(default_factory=Cascade)
    CIRCUIT: Circuit = field(default_factory=Circuit)
    CACHE: Cache = field(default_factory=Cache)
    CONTEXT: Context = field(default_factory=Context)
