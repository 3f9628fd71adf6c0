"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
import logging
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from models.config_models import Config
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Callable
    from dataclasses import Field as DataclassField
else:
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: Final[list[str]] = ["google", "deepl", "google_cloud", "phrasebook"]
PROVIDER_KEYS: Final[frozenset[str]] = frozenset({"name", "priority", "quality", "budget"})
LOG_LEVELS: Final[tuple[str, ...]] = ("NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    This class reads the configuration file, applies formatting rules, and validates settings.
    It raises exceptions for any issues encountered during the loading process.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        debug (bool): Force debug logging regardless of the file setting.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(self, *, config_filename: str, script_name: str, debug: bool = False) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        parser: ConfigParser = ConfigParser()

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self.config.GENERAL.SCRIPT_NAME = script_name
        self._convert_settings(parser)
        if debug:
            self.config.GENERAL.DEBUG = True
        self._validate_settings()
        self._resolve_paths()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Convert configuration settings from the parser to the Config object.

        Args:
            parser (ConfigParser): Parsed INI data.

        Raises:
            ConfigFormatError: If a value cannot be parsed or coerced to the expected type.
        """
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Section not defined, using defaults: '%s'", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Format every key of one section and assign it to the corresponding Config attribute."""
        for key in fields(getattr(self.config, section.name)):
            if not parser.has_option(section.name, key.name):
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate providers, cache bounds, thresholds and time settings.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        try:
            self._validate_log_level()
            self._validate_providers()
            self._validate_cache()
            self._validate_ratio("CASCADE", "EARLY_ACCEPT_SCORE")
            self._validate_ratio("CACHE", "SNAPSHOT_PROBABILITY")
            for section_name, key_name in (
                ("CASCADE", "MAX_ATTEMPTS"),
                ("CASCADE", "ATTEMPT_TIMEOUT"),
                ("CIRCUIT", "GENERIC_COOLDOWN"),
                ("CIRCUIT", "RATE_LIMIT_COOLDOWN"),
                ("CIRCUIT", "MAX_COOLDOWN"),
                ("CACHE", "SNAPSHOT_INTERVAL"),
                ("CONTEXT", "WINDOW_SIZE"),
            ):
                self._validate_positive(section_name, key_name)
        except ConfigFormatError:
            raise
        except (NameError, SyntaxError, AttributeError, TypeError, ValueError) as err:
            msg: str = f"Invalid configuration value: {err}"
            raise ConfigFormatError(msg) from None

    def _validate_log_level(self) -> None:
        value: str = self.config.GENERAL.LOG_LEVEL
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            msg: str = f"Unsupported log level for 'GENERAL.LOG_LEVEL': {value}"
            raise ConfigValueError(msg)
        self.config.GENERAL.LOG_LEVEL = value.upper()

    def _validate_providers(self) -> None:
        """Validate the provider list.

        Unknown provider names are logged as warnings and left for the registry to skip.

        Raises:
            ConfigTypeError: If the list or an item has the wrong type.
            ConfigValueError: If a name is missing or duplicated, or a number is out of range.
        """
        providers: Any = self.config.TRANSLATION.PROVIDERS
        field_name: str = "TRANSLATION.PROVIDERS"
        msg: str
        if not isinstance(providers, list):
            msg = f"Unsupported type used for '{field_name}': {type(providers)}"
            raise ConfigTypeError(msg)

        seen: set[str] = set()
        for index, item in enumerate(providers):
            if not isinstance(item, dict):
                msg = f"'{field_name}[{index}]' must be a dict, not {type(item)}"
                raise ConfigTypeError(msg)
            name: Any = item.get("name")
            if not isinstance(name, str) or not name:
                msg = f"'{field_name}[{index}]' has no provider name"
                raise ConfigValueError(msg)
            if name in seen:
                msg = f"Duplicate provider name in '{field_name}': '{name}'"
                raise ConfigValueError(msg)
            seen.add(name)

            if unknown_keys := set(item) - PROVIDER_KEYS:
                logger.warning("Ignoring unknown keys %s for provider '%s'", sorted(unknown_keys), name)
            if name not in ALLOWED_TRANSLATION_ENGINES:
                logger.warning("Unknown value '%s' is set for '%s'", name, field_name)

            self._check_provider_number(item, "priority", name, minimum=None, maximum=None, integer=True)
            self._check_provider_number(item, "budget", name, minimum=0, maximum=None, integer=True)
            self._check_provider_number(item, "quality", name, minimum=0.0, maximum=1.0, integer=False)

    @staticmethod
    def _check_provider_number(
        item: dict[str, Any],
        key: str,
        name: str,
        *,
        minimum: float | None,
        maximum: float | None,
        integer: bool,
    ) -> None:
        if key not in item:
            return
        value: Any = item[key]
        allowed: tuple[type, ...] = (int,) if integer else (int, float)
        msg: str
        if isinstance(value, bool) or not isinstance(value, allowed):
            msg = f"Provider '{name}': '{key}' must be {'an integer' if integer else 'a number'}, not {value!r}"
            raise ConfigTypeError(msg)
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            msg = f"Provider '{name}': '{key}' is out of range: {value}"
            raise ConfigValueError(msg)

    def _validate_cache(self) -> None:
        capacity: int = self.config.CACHE.CAPACITY
        retention: int = self.config.CACHE.RETENTION
        if not 0 < retention <= capacity:
            msg: str = f"'CACHE.RETENTION' must satisfy 0 < RETENTION <= CAPACITY ({retention=}, {capacity=})"
            raise ConfigValueError(msg)

    def _validate_ratio(self, section_name: str, key_name: str) -> None:
        value: float = getattr(getattr(self.config, section_name), key_name)
        if not 0.0 <= value <= 1.0:
            msg: str = f"'{section_name}.{key_name}' must be within [0, 1]: {value}"
            raise ConfigValueError(msg)

    def _validate_positive(self, section_name: str, key_name: str) -> None:
        value: float = getattr(getattr(self.config, section_name), key_name)
        if value <= 0:
            msg: str = f"'{section_name}.{key_name}' must be positive: {value}"
            raise ConfigValueError(msg)

    def _resolve_paths(self) -> None:
        """Expand `~` and environment variables in file settings and make them absolute."""
        if self.config.CACHE.SNAPSHOT_PATH:
            self.config.CACHE.SNAPSHOT_PATH = str(FileUtils.resolve_path(self.config.CACHE.SNAPSHOT_PATH))
        if self.config.GENERAL.LOG_FILE:
            self.config.GENERAL.LOG_FILE = str(FileUtils.resolve_path(self.config.GENERAL.LOG_FILE))


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, str, list, dict)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field default.

        Args:
            section (DataclassField[Any]): Configuration section field containing the key.
            key (DataclassField[Any]): Target field within the section.

        Returns:
            Any: Parsed value coerced to the type declared in the config dataclass.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        formatters: dict[
            type[bool | int | float], Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float]
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float] | None = formatters.get(
            type(getattr(getattr(self.config, section.name), key.name))
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            return ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

    def _strip_quotes(self, section: DataclassField[Any], key: DataclassField[Any]) -> str:
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"'):
            value = value.removeprefix(char).removesuffix(char)
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        return float(self._strip_quotes(section, key))

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        return int(float(self._strip_quotes(section, key)))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
