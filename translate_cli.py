"""Command-line front end for the translation engine.

Translates the text given on the command line, or every line read from standard input
when no text is given. Lines read from standard input share one conversation, so the
context stage sees them as consecutive messages.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from config.loader import ConfigLoader, ConfigLoaderError
from core.engine_context import EngineContext
from models.translation_models import EnhancedTranslation, TranslationRequest
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import TranslationOutcome

CFG_FILE: Final[str] = "translation_engine.ini"

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = _ArgumentParser(
        description="Translate text through the provider cascade",
        epilog="Example: python translate_cli.py -s es -t en hola amigos",
    )
    parser.add_argument("text", nargs="*", help="Text to translate. Reads lines from stdin when omitted.")
    parser.add_argument("-s", "--source", required=True, metavar="LANG", help="Source language code")
    parser.add_argument("-t", "--target", required=True, metavar="LANG", help="Target language code")
    parser.add_argument("-c", "--config", default=CFG_FILE, metavar="FILE", help=f"INI file (default: {CFG_FILE})")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--verbose", action="store_true", help="Show provider, score and context hints")
    parser.add_argument("--stats", action="store_true", help="Print provider statistics before exiting")
    parser.add_argument("--export-cache", metavar="FILE", help="Write a readable cache dump before exiting")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file.

    Raises:
        ConfigLoaderError: If the configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).stem
    return ConfigLoader(config_filename=args.config, script_name=script_name, debug=args.debug).config


def setup_logging(config: Config) -> None:
    log_utils = LoggerUtils(config.GENERAL.LOG_FILE)
    log_utils.set_level("DEBUG" if config.GENERAL.DEBUG else config.GENERAL.LOG_LEVEL)
    logger.debug("Logging configured at level %s", log_utils.get_level().name)


def format_outcome(outcome: TranslationOutcome, *, verbose: bool = False) -> str:
    if not verbose or not outcome.ok:
        return outcome.display_text

    lines: list[str] = [outcome.display_text, f"  provider: {outcome.provider}, score: {outcome.score:.2f}"]
    if isinstance(outcome, EnhancedTranslation):
        if outcome.topics:
            lines.append(f"  topics: {', '.join(outcome.topics)}")
        lines.extend(f"  note: {note}" for note in outcome.cultural_notes)
        lines.extend(f"  formal: '{before}' -> '{after}'" for before, after in outcome.substitutions)
    return "\n".join(lines)


async def run(args: argparse.Namespace, config: Config) -> int:
    context = EngineContext(config)
    await context.start()
    try:
        texts: list[str] = [" ".join(args.text)] if args.text else [line.rstrip("\n") for line in sys.stdin]
        for text in texts:
            if not text.strip():
                continue
            outcome: TranslationOutcome = await context.translate(TranslationRequest(text, args.source, args.target))
            print(format_outcome(outcome, verbose=args.verbose))

        if args.stats:
            for line in context.stats.summary():
                print(line)
            for name, quota in (await context.registry.quota_report()).items():
                if quota.is_quota_valid:
                    print(f"{name}: {quota.count}/{quota.limit} characters used")
        if args.export_cache:
            export_path: Path = FileUtils.resolve_path(args.export_cache)
            if not context.cache_manager.export_cache_detailed(export_path):
                print(f"Failed to export cache to {export_path}", file=sys.stderr)
    finally:
        await context.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    check_python_version()
    args: argparse.Namespace = parse_arguments(argv)
    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        print("\nError: Failed to load configuration file.", file=sys.stderr)
        print(f"Details: {err}", file=sys.stderr)
        return 1

    setup_logging(config)
    try:
        return asyncio.run(run(args, config))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
