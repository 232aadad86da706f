# Copyright 2025 CrownOps Engineering
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

"""Structured logging utilities shared across distpub components."""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Final, Literal, TypedDict, Unpack, cast, override

from distpub.core.model_types import LogComponent, LogFormat, StepName, Target

ROOT_LOGGER_NAME: Final[str] = "distpub"
LOG_FORMAT_ENV: Final[str] = "DISTPUB_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "DISTPUB_LOG_LEVEL"
NO_COLOR_ENV: Final[str] = "NO_COLOR"

SUCCESS: Final[int] = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_FORMATS: Final[tuple[Literal["text", "json"], ...]] = cast(
    "tuple[Literal['text', 'json'], ...]",
    tuple(format_.value for format_ in LogFormat),
)
LOG_LEVELS: Final[tuple[Literal["debug", "info", "warning", "error"], ...]] = (
    "debug",
    "info",
    "warning",
    "error",
)
STRUCTURED_FIELDS: Final[tuple[str, ...]] = (
    "component",
    "step",
    "tool",
    "target",
    "exit_code",
    "duration_ms",
    "path",
    "details",
)
CHILD_LOGGERS: Final[tuple[str, ...]] = (
    "distpub.cli",
    "distpub.config",
    "distpub.pipeline",
    "distpub.process",
    "distpub.tools",
)

_LEVEL_COLOURS: Final[dict[int, str]] = {
    logging.DEBUG: "\033[0;37m",
    logging.INFO: "\033[0;34m",
    SUCCESS: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
}
_RESET: Final[str] = "\033[0m"


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Resolved logging configuration for diagnostics and debugging."""

    format: LogFormat
    level: int
    level_name: str


def _json_ready(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): _json_ready(item) for key, item in cast("Mapping[object, object]", value).items()}
    if isinstance(value, list | tuple):
        return [_json_ready(item) for item in cast("list[object]", value)]
    return value


class JSONLogFormatter(logging.Formatter):
    """Render log records as structured JSON objects."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: Log record to serialise.

        Returns:
            JSON-formatted string containing standard and structured fields.
        """
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(_json_ready(payload), ensure_ascii=False, default=str)


class TextLogFormatter(logging.Formatter):
    """Readable, single-line formatter for CLI output.

    Level labels are coloured when ``colour`` is enabled, matching the
    ``[INFO]`` / ``[SUCCESS]`` / ``[WARNING]`` / ``[ERROR]`` prefixes.
    """

    def __init__(self, *, colour: bool = False) -> None:
        super().__init__("[%(levelname)s] %(message)s")
        self.colour = colour

    @override
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.colour:
            return message
        prefix = f"[{record.levelname}]"
        colour = _LEVEL_COLOURS.get(record.levelno)
        if colour is None or not message.startswith(prefix):
            return message
        return f"{colour}{prefix}{_RESET}{message[len(prefix) :]}"


def _coerce_log_format(log_format: LogFormat | str) -> LogFormat:
    if isinstance(log_format, LogFormat):
        return log_format
    return LogFormat.from_str(log_format)


def _coerce_log_level(level: str | int) -> tuple[int, str]:
    if isinstance(level, int):
        return level, logging.getLevelName(level).lower()
    value = str(level).strip().lower()
    match value:
        case "debug":
            return logging.DEBUG, "debug"
        case "warning":
            return logging.WARNING, "warning"
        case "error":
            return logging.ERROR, "error"
        case _:
            return logging.INFO, "info"


def _select_format(preferred: LogFormat | str | None) -> LogFormat:
    if preferred is not None:
        return _coerce_log_format(preferred)
    env_value = os.getenv(LOG_FORMAT_ENV)
    if not env_value:
        return LogFormat.TEXT
    try:
        return _coerce_log_format(env_value)
    except ValueError:
        # unknown env values fall back like DISTPUB_LOG_LEVEL does
        return LogFormat.TEXT


def _select_level(level: str | int | None) -> tuple[int, str]:
    if level is not None:
        return _coerce_log_level(level)
    env_value = os.getenv(LOG_LEVEL_ENV)
    if env_value:
        return _coerce_log_level(env_value)
    return _coerce_log_level("info")


def _use_colour(stream: object) -> bool:
    if os.getenv(NO_COLOR_ENV):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _configure_handler(log_format: LogFormat) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if log_format is LogFormat.JSON:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(TextLogFormatter(colour=_use_colour(handler.stream)))
    return handler


def configure_logging(
    log_format: LogFormat | str | None = None,
    *,
    log_level: str | int | None = None,
) -> LogConfig:
    """Configure distpub logging according to the requested format and level.

    Args:
        log_format: Desired log output format. ``None`` falls back to the
            ``DISTPUB_LOG_FORMAT`` environment variable or ``text``.
        log_level: Preferred verbosity (string or numeric). ``None`` consults
            ``DISTPUB_LOG_LEVEL`` or defaults to ``info``.

    Returns:
        A ``LogConfig`` describing the selected formatter and resolved numeric
        log level, which is also applied to the root and child loggers.
    """
    selected_format = _select_format(log_format)
    level_value, level_name = _select_level(log_level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(_configure_handler(selected_format))
    root_logger.setLevel(level_value)
    root_logger.propagate = False

    for child in CHILD_LOGGERS:
        logging.getLogger(child).setLevel(level_value)
    return LogConfig(format=selected_format, level=level_value, level_name=level_name)


class _StructuredLogBase(TypedDict):
    component: LogComponent


class StructuredLogExtra(_StructuredLogBase, total=False):
    """Structured logging extras accepted by distpub log records."""

    step: StepName
    tool: str
    target: Target
    exit_code: int
    duration_ms: float
    path: str
    details: Mapping[str, object]


class _StructuredLogKwargs(TypedDict, total=False):
    step: StepName | str
    tool: str
    target: Target | str
    exit_code: int
    duration_ms: float
    path: str | os.PathLike[str]
    details: Mapping[str, object]


def structured_extra(
    component: LogComponent,
    **kwargs: Unpack[_StructuredLogKwargs],
) -> StructuredLogExtra:
    """Return a consistently typed ``logging.extra`` payload.

    Args:
        component: Logical logging component for the record.
        **kwargs: Optional structured fields (step, tool, target, exit code, ...).

    Returns:
        Mapping suitable for the ``extra`` parameter when emitting log records.
    """
    extra: StructuredLogExtra = {"component": component}
    step = kwargs.get("step")
    if step is not None:
        extra["step"] = StepName(step)
    tool = kwargs.get("tool")
    if tool:
        extra["tool"] = str(tool)
    target = kwargs.get("target")
    if target is not None:
        extra["target"] = Target.from_str(str(target))
    exit_code = kwargs.get("exit_code")
    if exit_code is not None:
        extra["exit_code"] = int(exit_code)
    duration_ms = kwargs.get("duration_ms")
    if duration_ms is not None:
        extra["duration_ms"] = float(duration_ms)
    path = kwargs.get("path")
    if path is not None:
        extra["path"] = os.fspath(path)
    details = kwargs.get("details")
    if isinstance(details, Mapping) and details:
        extra["details"] = dict(details)
    return extra


__all__ = [
    "LOG_FORMATS",
    "LOG_LEVELS",
    "SUCCESS",
    "JSONLogFormatter",
    "LogConfig",
    "StructuredLogExtra",
    "TextLogFormatter",
    "configure_logging",
    "structured_extra",
]
