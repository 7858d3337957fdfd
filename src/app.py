"""Application entry point for the git-precommit-checks hook."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

import settings
from adapters.console_reporter import ConsoleReporter
from adapters.git_source import GitStagedFileSource
from core.config import DisplayConfig
from core.errors import (
    ConfigLoadError,
    InvalidPatternError,
    PrecommitChecksError,
    SourceUnavailableError,
)
from core.ports import Reporter
from core.processor import HOOK_TITLE, ChecksProcessor
from core.rules_engine import EXIT_OK, build_rules

# sysexits.h codes, kept distinct from the "matches found" status (1).
EX_DATAERR = 65
EX_UNAVAILABLE = 69
EX_SOFTWARE = 70

NO_CONFIG_TEXT = (
    f'configuration is missing in "{settings.PACKAGE_JSON_FILENAME}" '
    f'or "{settings.CONFIG_FILENAME}".'
)

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level_name = settings.log_level_override() or ("DEBUG" if verbose else "WARNING")
    level = getattr(logging, level_name, logging.WARNING)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))

    logging.basicConfig(level=level, handlers=[handler], force=True)


def exit_code_for_error(error: PrecommitChecksError) -> int:
    """Map a fatal error onto a process exit status."""

    if isinstance(error, (ConfigLoadError, InvalidPatternError)):
        return EX_DATAERR
    if isinstance(error, SourceUnavailableError):
        return EX_UNAVAILABLE
    return EX_SOFTWARE


def _excluded_paths(config_path: Optional[str]) -> list[str]:
    # The checks configuration is excluded so its own patterns never match.
    if not config_path:
        return []
    return [os.path.relpath(os.path.abspath(config_path))]


def _run(args: argparse.Namespace, reporter: Optional[Reporter] = None) -> int:
    config = settings.load_config(args.config)
    display = config.display if config else DisplayConfig()
    if display.verbose and not args.verbose:
        _configure_logging(True)
    reporter = reporter or ConsoleReporter(display)
    if display.notifications:
        LOGGER.debug("display.notifications is ignored: desktop notifications are not sent")

    if config is None:
        reporter.notice("warning", HOOK_TITLE, NO_CONFIG_TEXT)
        return EXIT_OK

    # Compile every rule before touching git: a broken pattern must fail the
    # hook before any result is shown.
    rules = build_rules(config.rules)
    LOGGER.info("%s rules are loaded from %s", len(rules), config.source_path)

    if args.command == "rules":
        reporter.rules_summary(rules)
        return EXIT_OK

    source = GitStagedFileSource(excluded_paths=_excluded_paths(config.source_path))
    processor = ChecksProcessor(
        rules=rules,
        source=source,
        reporter=reporter,
        show_rules_summary=display.rules_summary,
    )
    return processor.run_sync().exit_code


def main(argv: Optional[list[str]] = None, reporter: Optional[Reporter] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="git-precommit-checks",
        description="Block commits whose staged additions match configured patterns.",
    )
    parser.add_argument("--config", help="Path to a JSON configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace processing on stderr")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("run", help="Check staged changes (default)")
    subparsers.add_parser("rules", help="Print the configured rules and exit")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return _run(args, reporter)
    except PrecommitChecksError as exc:
        LOGGER.debug("Pre-commit checks aborted", exc_info=True)
        (reporter or ConsoleReporter(DisplayConfig())).notice("error", HOOK_TITLE, str(exc))
        return exit_code_for_error(exc)
    except Exception:
        LOGGER.exception("Pre-commit checks failed due to unexpected error.")
        raise


if __name__ == "__main__":
    sys.exit(main())
