"""
Structured logging for the AutoProof registry.

Each registry decision becomes one event line (JSON by default) that
can be correlated with the attestation journal by actor, part id and
logical time. Records are optionally mirrored into the stdlib
``logging`` tree so a host application can route them with its own
handlers.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Log levels, ordered like the stdlib ones."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)

    @classmethod
    def parse(cls, value: LogLevel | str) -> LogLevel:
        """Accept a LogLevel or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown log level {value!r} (expected one of: {choices})") from None


@dataclass
class LogRecord:
    """One emitted event.

    ``data`` holds bound context merged with per-call fields; it is
    flattened into the top level when rendered as JSON.
    """

    level: str
    event: str
    message: str = ""
    logger_name: str = ""
    thread_name: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        rendered = {
            "timestamp": self.timestamp,
            "level": self.level,
            "logger_name": self.logger_name,
            "event": self.event,
            "message": self.message,
            "thread_name": self.thread_name,
        }
        for key, value in self.data.items():
            rendered.setdefault(key, value)
        return rendered

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class StructuredLogger:
    """Event logger used by PartRegistry.

    Example:
        log = StructuredLogger("autoproof.registry")
        log.transition("part_registered", actor=admin, part_id=1)
        # {"level": "info", "event": "part_registered", "part_id": 1, ...}

        plant_log = log.bind(registry="plant-a")
        plant_log.info("pause_changed", paused=True)
        # every line now carries registry="plant-a"
    """

    def __init__(
        self,
        name: str = "autoproof",
        level: LogLevel | str = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
        mirror_to_stdlib: bool = False,
    ):
        """
        Args:
            name: Logger name, also used for the stdlib mirror.
            level: Minimum level that is emitted.
            output: Stream to write to (default: stderr).
            json_format: One JSON object per line, else a readable line.
            mirror_to_stdlib: Also pass each record to ``logging.getLogger(name)``.
        """
        self.name = name
        self._level = LogLevel.parse(level)
        self._output = output
        self._json_format = json_format
        self._mirror = mirror_to_stdlib
        self._context: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._dropped = 0

    @property
    def level(self) -> LogLevel:
        return self._level

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level.numeric >= self._level.numeric

    def bind(self, **context: Any) -> StructuredLogger:
        """Return a child logger that adds ``context`` to every record."""
        child = StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
            mirror_to_stdlib=self._mirror,
        )
        child._context = {**self._context, **context}
        # Children share the parent's lock so lines never interleave.
        child._lock = self._lock
        return child

    def _log(self, level: LogLevel, event: str, message: str = "", **data: Any) -> None:
        if not self.is_enabled_for(level):
            return
        self._emit(LogRecord(
            level=level.value,
            event=event,
            message=message,
            logger_name=self.name,
            thread_name=threading.current_thread().name,
            data={**self._context, **data},
        ))

    def _emit(self, record: LogRecord) -> None:
        line = record.to_json() if self._json_format else self._format_human(record)
        try:
            with self._lock:
                print(line, file=self._output or sys.stderr)
        except (OSError, ValueError):
            self._handle_error(record)
        if self._mirror:
            logging.getLogger(self.name).log(
                LogLevel(record.level).numeric,
                "%s %s",
                record.event,
                record.message,
                extra={"autoproof": record.data},
            )

    def _handle_error(self, record: LogRecord) -> None:
        """A broken stream drops the line; it never fails the caller.

        Mirrors ``logging.Handler.handleError``.
        """
        self._dropped += 1
        logging.getLogger(__name__).debug(
            "Dropped %s record from %s", record.event, self.name, exc_info=True
        )

    @property
    def dropped(self) -> int:
        """Records lost to a failing output stream."""
        return self._dropped

    @staticmethod
    def _format_human(record: LogRecord) -> str:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.timestamp))
        line = f"[{stamp}] [{record.level.upper()}] [{record.event}]"
        if record.message:
            line += f" {record.message}"
        if record.data:
            fields = " ".join(f"{key}={value}" for key, value in record.data.items())
            line += f" ({fields})"
        return line

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.ERROR, event, message, **data)

    def critical(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.CRITICAL, event, message, **data)

    # Registry events

    def transition(
        self,
        event: str,
        actor: str,
        part_id: int | None = None,
        **extra: Any,
    ) -> None:
        """Log an accepted state transition at INFO."""
        subject = "registry" if part_id is None else f"part {part_id}"
        self.info(
            event,
            f"{event.replace('_', ' ')} on {subject}",
            actor=actor,
            part_id=part_id,
            **extra,
        )

    def transition_denied(
        self,
        action: str,
        actor: str,
        error_code: int,
        error_name: str,
        reason: str = "",
        **extra: Any,
    ) -> None:
        """Log a rejected operation at WARNING."""
        self.warning(
            "transition_denied",
            reason,
            action=action,
            actor=actor,
            error_code=error_code,
            error_name=error_name,
            **extra,
        )


_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
    mirror_to_stdlib: bool = False,
) -> StructuredLogger:
    """Replace the process-wide logger returned by :func:`get_logger`."""
    global _global_logger

    _global_logger = StructuredLogger(
        name="autoproof",
        level=LogLevel.parse(level),
        output=output,
        json_format=json_format,
        mirror_to_stdlib=mirror_to_stdlib,
    )
    return _global_logger


def get_logger(name: str = "autoproof") -> StructuredLogger:
    """Get the process-wide logger, creating it on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name)
    return _global_logger
