"""Namespaced logging for the translation engine.

Every module logs through `LoggerUtils.get_logger(__name__)`, which places the logger under
one namespace root. Handlers are attached to that root once per process by constructing
`LoggerUtils`; loggers obtained before that point pick the handlers up automatically.
"""

from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, Handler, NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, NamedTuple, Self

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

__all__: list[str] = ["LoggerUtils"]

type LevelType = Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

NAMESPACE: Final[str] = "TranslationEngine"
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO

CONSOLE_LEVEL: Final[int] = logging.WARNING
CONSOLE_FORMAT: Final[str] = "%(levelname)s: %(message)s"

FILE_LEVEL: Final[int] = logging.DEBUG
FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(name)-40s %(funcName)s:%(lineno)d\t%(message)s"
FILE_MAX_BYTES: Final[int] = 2 * 1024 * 1024
FILE_BACKUPS: Final[int] = 2


class LogLevel(NamedTuple):
    name: str
    value: int


class LoggerUtils:
    """Process-wide handler setup for the engine namespace.

    The first construction attaches a console handler (warnings and above, or a NullHandler
    when there is no stderr) and, when a file name is given, a rotating UTF-8 file handler
    that keeps DEBUG records. Later constructions return the same instance untouched.
    """

    _instance: ClassVar[Self | None] = None
    _configured: ClassVar[bool] = False
    _saved_showwarning: ClassVar[Callable[..., None] | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Attach the handlers.

        Args:
            filename (str | Path): Absolute path of the log file. Empty disables file logging.
            use_null_console (bool): Discard console output instead of writing to stderr.
        """
        if LoggerUtils._configured:
            return

        self.root_logger: logging.Logger = logging.getLogger(NAMESPACE)
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
        self.root_logger.addHandler(self._console_handler(null=use_null_console or sys.stderr is None))

        log_file: str = str(filename).strip()
        if log_file and (file_handler := self._file_handler(log_file)) is not None:
            self.root_logger.addHandler(file_handler)

        LoggerUtils._saved_showwarning = warnings.showwarning
        warnings.showwarning = self.warning_to_log
        LoggerUtils._configured = True

    @staticmethod
    def _console_handler(*, null: bool) -> Handler:
        if null:
            return NullHandler()
        handler: StreamHandler = StreamHandler(sys.stderr)
        handler.setLevel(CONSOLE_LEVEL)
        handler.setFormatter(Formatter(CONSOLE_FORMAT))
        return handler

    def _file_handler(self, log_file: str) -> Handler | None:
        try:
            handler = RotatingFileHandler(log_file, maxBytes=FILE_MAX_BYTES, backupCount=FILE_BACKUPS, encoding="utf-8")
        except OSError as err:
            self.root_logger.error("Cannot open log file '%s', file logging disabled: %s", log_file, err)
            return None
        handler.setLevel(FILE_LEVEL)
        handler.setFormatter(Formatter(FILE_FORMAT))
        return handler

    @classmethod
    def reset(cls) -> None:
        """Detach and close the namespace handlers so that the next construction configures again."""
        root: logging.Logger = logging.getLogger(NAMESPACE)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        if cls._saved_showwarning is not None:
            warnings.showwarning = cls._saved_showwarning
            cls._saved_showwarning = None
        cls._instance = None
        cls._configured = False

    def warning_to_log(self, message, category, filename, lineno, file=None, line=None) -> None:
        """`warnings.showwarning` replacement writing into the engine log."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    def set_level(self, level: LevelType | str) -> None:
        """Set the namespace level. Unknown names fall back to INFO with a warning."""
        value: int | None = logging.getLevelNamesMapping().get(str(level).upper())
        if value is None:
            self.root_logger.warning("Unknown logging level '%s', using INFO", level)
            value = DEFAULT_LOG_LEVEL
        self.root_logger.setLevel(value)

    def get_level(self) -> LogLevel:
        value: int = self.root_logger.getEffectiveLevel()
        return LogLevel(logging.getLevelName(value), value)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Logger `<namespace>.<name>`, or the namespace root when name is None."""
        return logging.getLogger(f"{NAMESPACE}.{name}" if name else NAMESPACE)
