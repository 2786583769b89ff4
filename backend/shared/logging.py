"""Structured logging setup for the solitaire engine.

Environment variables:
- LOG_FORMAT: "json" renders one JSON object per line; "console" or unset
  renders human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".
- LOG_KEEP_FILES: how many session log files to keep in the log directory
  (default 10). Older files are deleted when a new session starts.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
LOG_FILE_GLOB = "????-??-??_??-??-??.log"
DEFAULT_KEEP_LOG_FILES = 10
SEED_PREVIEW_LENGTH = 12

_LOG_FORMATS = {"json", "console", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

logger = structlog.get_logger()


def _enum_value(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render Enum members (suits, card sizes, hint kinds) as their values."""
    for key, value in event_dict.items():
        if isinstance(value, dict):
            event_dict[key] = {k: _enum_value(v) for k, v in value.items()}
        elif isinstance(value, list | tuple):
            event_dict[key] = [_enum_value(v) for v in value]
        else:
            event_dict[key] = _enum_value(value)
    return event_dict


def _shorten_seed(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Cut a 192-char deal seed down to a prefix. The full seed is in the saved game."""
    seed = event_dict.get("game_seed")
    if isinstance(seed, str) and len(seed) > SEED_PREVIEW_LENGTH:
        event_dict["game_seed"] = seed[:SEED_PREVIEW_LENGTH]
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_choice(name: str, default: str, choices: set[str]) -> str:
    value = os.environ.get(name, default).upper()
    if value not in {c.upper() for c in choices}:
        shown = ", ".join(repr(c) for c in sorted(choices) if c)
        msg = f"Invalid {name}={value!r}. Must be one of {shown}."
        raise ValueError(msg)
    return value


def _resolve_json_mode() -> bool:
    return _env_choice("LOG_FORMAT", "", _LOG_FORMATS) == "JSON"


def _resolve_log_level() -> int:
    return getattr(logging, _env_choice("LOG_LEVEL", "INFO", _LOG_LEVELS))


def _resolve_keep_files() -> int:
    raw = os.environ.get("LOG_KEEP_FILES", str(DEFAULT_KEEP_LOG_FILES))
    try:
        keep = int(raw)
    except ValueError:
        keep = 0
    if keep < 1:
        msg = f"Invalid LOG_KEEP_FILES={raw!r}. Must be a positive integer."
        raise ValueError(msg)
    return keep


def _build_formatter(*, json_mode: bool, colors: bool = False) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def prune_log_files(log_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest `keep` session log files. Returns the deleted paths."""
    # timestamped names sort chronologically
    stale = sorted(log_dir.glob(LOG_FILE_GLOB))[:-keep]
    for path in stale:
        path.unlink(missing_ok=True)
    return stale


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
) -> Path | None:
    """Configure structlog to render through stdlib logging.

    Always logs to stdout. When log_dir is given (and not under pytest),
    also logs to a new file named after the session start time, pruning
    older session files beyond LOG_KEEP_FILES. Returns the file path, or
    None when no file is written.
    """
    json_mode = _resolve_json_mode()
    if level is None:
        level = _resolve_log_level()

    # format_exc_info lives in the formatter so tracebacks render once per handler
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            _shorten_seed,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_build_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root_logger.addHandler(stdout_handler)

    if log_dir is None or _is_test():
        return None

    keep = _resolve_keep_files()
    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    file_path = dir_path / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    file_handler = logging.FileHandler(file_path)
    file_handler.setFormatter(_build_formatter(json_mode=json_mode))
    root_logger.addHandler(file_handler)

    pruned = prune_log_files(dir_path, keep)
    if pruned:
        logger.debug("pruned old log files", count=len(pruned))
    return file_path
