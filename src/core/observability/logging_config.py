"""
Logging configuration — set up once by the installer CLI.

Modules log with ``logger = logging.getLogger(__name__)``; user-facing
progress goes through ``click.echo`` instead, so the console handler
stays quiet (WARNING) unless asked otherwise.

Console level, highest precedence first:
    --debug  >  --verbose  >  --quiet  >  TRELLIS_SETUP_LOG_LEVEL  >  WARNING

A log file is written when TRELLIS_SETUP_LOG_FILE is set, at
TRELLIS_SETUP_LOG_FILE_LEVEL (defaults to the console level). Useful
for keeping a full record of a long extension build.
"""

from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "TRELLIS_SETUP_LOG_LEVEL"
LOG_FILE_ENV = "TRELLIS_SETUP_LOG_FILE"
LOG_FILE_LEVEL_ENV = "TRELLIS_SETUP_LOG_FILE_LEVEL"

# (format, datefmt) per console threshold, checked lowest level first
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# pip's vendored libraries log at INFO when imported in-process
_NOISY_LOGGERS = ("urllib3", "filelock", "pip")


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_DEFAULT
    for threshold, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate, candidate_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers for this process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Clamp ``_NOISY_LOGGERS`` to WARNING.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))
        root_level = min(root_level, file_level)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(root_level)

    if quiet_third_party:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def setup_from_env(level: str) -> None:
    """``setup_logging`` with file output taken from the environment.

    Third-party loggers are only left alone at DEBUG. An unwritable
    log file degrades to console-only logging with a warning.
    """
    quiet_third_party = _parse_level(level) > logging.DEBUG
    log_file = os.environ.get(LOG_FILE_ENV)
    try:
        setup_logging(
            level=level,
            log_file=log_file,
            log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
            quiet_third_party=quiet_third_party,
        )
    except OSError as exc:
        setup_logging(level=level, quiet_third_party=quiet_third_party)
        logger.warning("Cannot write log file %s (%s); logging to console only", log_file, exc)


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant (WARNING when unknown)."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
