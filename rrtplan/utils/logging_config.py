# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging.

Modules call ``logger = setup_logger()`` at import. Records go through
structlog's stdlib bridge and are rendered twice: as one compact line on
stdout and as a JSON object in a rotating ``.jsonl`` file.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
import inspect
import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import sys
import tempfile
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from rrtplan.constants import RRTPLAN_LOG_DIR, RRTPLAN_PROJECT_ROOT
from rrtplan.core.global_config import LoggingConfig

_structlog_configured = False
_log_file: Path | None = None

# Only useful in the JSON file
_CONSOLE_HIDDEN_KEYS = frozenset(
    {"func_name", "lineno", "exception", "exc_info", "_record", "_from_structlog"}
)

_RESET = "\033[0m"
_DIM = "\033[1;30;40m"
_EVENT = "\033[0;34m"
_KEY = "\033[0;36m"
_VALUE = "\033[0;35m"
_LEVEL_COLORS = {
    "deb": "\033[1;36;40m",
    "inf": "\033[1;32;40m",
    "war": "\033[1;33;40m",
    "err": "\033[1;31;40m",
    "cri": "\033[1;31;40m",
}


def log_directory(config: LoggingConfig) -> Path:
    """Directory for log files, created on demand.

    Tried in order: ``RRTPLAN_LOG_DIRECTORY``, ``logs/`` of a source checkout,
    ``$XDG_STATE_HOME/rrtplan/logs`` (``~/.local/state`` when unset). The
    temp dir is the last resort when the preferred one cannot be created.
    """
    if config.directory is not None:
        preferred = config.directory
    elif (RRTPLAN_PROJECT_ROOT / ".git").exists():
        preferred = RRTPLAN_LOG_DIR
    else:
        state_home = os.getenv("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
        preferred = Path(state_home) / "rrtplan" / "logs"

    try:
        preferred.mkdir(parents=True, exist_ok=True)
        return preferred
    except OSError:
        fallback = Path(tempfile.gettempdir()) / "rrtplan" / "logs"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def _log_file_path(config: LoggingConfig) -> Path:
    # One file per process, shared by every logger
    global _log_file
    if _log_file is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _log_file = log_directory(config) / f"rrtplan_{stamp}_{os.getpid()}.jsonl"
    return _log_file


def _configure_structlog() -> None:
    global _structlog_configured
    if _structlog_configured:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
            ),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _structlog_configured = True


def _clock(timestamp: str | None) -> str:
    if timestamp:
        try:
            moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        except ValueError:
            return timestamp[:12]
    else:
        moment = datetime.now()
    return f"{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}"


class CompactConsoleRenderer:
    """Render ``HH:MM:SS.mmm [lvl][logger] event key=value ...`` lines.

    The logger column has a fixed width; longer names keep their tail.
    """

    def __init__(self, colors: bool = False, name_width: int = 30) -> None:
        self._colors = colors
        self._name_width = name_width

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:
        fields = {k: v for k, v in event_dict.items() if k not in _CONSOLE_HIDDEN_KEYS}

        clock = _clock(fields.pop("timestamp", None))
        level = str(fields.pop("level", "???"))[:3].lower()
        name = str(fields.pop("logger", ""))[-self._name_width :].ljust(self._name_width)
        event = fields.pop("event", "")
        pairs = sorted(fields.items())

        if not self._colors:
            head = f"{clock} [{level}][{name}] {event}"
            return " ".join([head, *(f"{k}={v}" for k, v in pairs)])

        head = (
            f"{_DIM}{clock}{_RESET} "
            f"{_LEVEL_COLORS.get(level, '')}[{level}]{_RESET}"
            f"{_DIM}[{name}]{_RESET} "
            f"{_EVENT}{event}{_RESET}"
        )
        return " ".join([head, *(f"{_KEY}{k}{_RESET}={_VALUE}{v}{_RESET}" for k, v in pairs)])


def _module_name(filename: str) -> str:
    try:
        return str(Path(filename).relative_to(RRTPLAN_PROJECT_ROOT))
    except ValueError:
        return filename


def setup_logger(name: str | None = None, *, level: int | None = None) -> Any:
    """Return a structlog logger writing to the console and the JSON log file.

    Calling it again for the same name replaces the handlers, so the latest
    settings win.

    Args:
        name: Logger name. Defaults to the calling file's path relative to
            the project root.
        level: Logging level. Defaults to ``RRTPLAN_LOG_LEVEL`` or INFO.

    Returns:
        A configured structlog logger instance.
    """
    if name is None:
        name = _module_name(inspect.stack()[1].filename)

    config = LoggingConfig()
    _configure_structlog()
    if level is None:
        level = config.numeric_level

    stdlib_logger = logging.getLogger(name)
    for handler in list(stdlib_logger.handlers):
        stdlib_logger.removeHandler(handler)
        handler.close()
    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = False

    colors = config.colors
    if colors is None:
        colors = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=CompactConsoleRenderer(colors))
    )
    stdlib_logger.addHandler(console_handler)

    if config.to_file:
        file_handler = RotatingFileHandler(
            _log_file_path(config),
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
        )
        stdlib_logger.addHandler(file_handler)

    return structlog.get_logger(name)
