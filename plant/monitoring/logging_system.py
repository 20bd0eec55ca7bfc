# plant/monitoring/logging_system.py
"""
Structured logging system for the plant simulator.

Provides:
- Structured logging (JSON and plain text formats)
- Event classification (severity and category)
- Log rotation for file output
- In-memory event trail for alarms and fatal failures
- Step-stamped log records

Plant-specific features:
- Plant step prefix on every console record
- Component context (reactor, condenser, pump_1, ...)
- Alarm records for component damage and failure
"""

import json
import logging
import logging.handlers
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "LogEntry",
    "StepFormatter",
    "JSONFormatter",
    "PlantLogger",
    "configure_logging",
    "get_logger",
]

# ----------------------------------------------------------------
# Event classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Plant event severity levels.

    Lower number = higher severity
    """

    CRITICAL = 1  # Fatal plant failure, game over
    ERROR = 2  # Error conditions
    WARNING = 3  # Component damage, degraded operation
    NOTICE = 4  # Normal but significant events (repairs, quench)
    INFO = 5  # Informational messages
    DEBUG = 6  # Per-step diagnostics


class EventCategory(Enum):
    """Plant event categories."""

    SAFETY = "safety"  # Damage, failure, quench
    ALARM = "alarm"  # Alarm conditions
    OPERATOR = "operator"  # Setpoint changes
    MAINTENANCE = "maintenance"  # Component failures and repairs
    SYSTEM = "system"  # Construction, configuration


# Map Python logging levels to plant severity
LOGGING_TO_SEVERITY = {
    logging.CRITICAL: EventSeverity.CRITICAL,
    logging.ERROR: EventSeverity.ERROR,
    logging.WARNING: EventSeverity.WARNING,
    logging.INFO: EventSeverity.INFO,
    logging.DEBUG: EventSeverity.DEBUG,
}

SEVERITY_TO_LOGGING = {
    EventSeverity.CRITICAL: logging.CRITICAL,
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.NOTICE: logging.INFO,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.DEBUG: logging.DEBUG,
}

# Categories that are retained in the event trail
TRAIL_CATEGORIES = {EventCategory.SAFETY, EventCategory.ALARM, EventCategory.MAINTENANCE}


# ----------------------------------------------------------------
# Structured Log Entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """Structured log entry for plant events."""

    step: int  # Plant step when event occurred
    wall_time: float  # Wall clock time
    severity: EventSeverity
    category: EventCategory
    message: str

    # Context
    component: str = ""  # Component name (reactor, pump_1, ...)
    source: str = ""  # Logger name

    # Additional data
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialisation."""
        entry_dict = {
            "step": self.step,
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }

        if self.component:
            entry_dict["component"] = self.component
        if self.source:
            entry_dict["source"] = self.source
        if self.data:
            entry_dict["data"] = json.dumps(self.data)

        return entry_dict

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        """Convert to human-readable format."""
        step_str = f"[STEP:{self.step:6d}]"
        severity_str = f"[{self.severity.name:8s}]"
        component_str = f"{self.component}:" if self.component else ""

        return f"{step_str} {severity_str} {component_str} {self.message}"


# ----------------------------------------------------------------
# Formatters
# ----------------------------------------------------------------


def _no_step() -> int:
    return 0


def _record_step(record: logging.LogRecord, step_source: Callable[[], int]) -> int:
    # PlantLogger stamps its own step; plain records fall back to step_source
    step = getattr(record, "plant_step", None)
    return step_source() if step is None else step


class StepFormatter(logging.Formatter):
    """Format log records with a plant step prefix."""

    def __init__(self, step_source: Callable[[], int] = _no_step):
        super().__init__(fmt="[STEP:%(plant_step)6d] [%(levelname)8s] %(name)s: %(message)s")
        self.step_source = step_source

    def format(self, record: logging.LogRecord) -> str:
        """Format with the plant step of the emitting logger."""
        record.plant_step = _record_step(record, self.step_source)
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON with the plant step."""

    def __init__(self, component: str = "", step_source: Callable[[], int] = _no_step):
        super().__init__()
        self.component = component
        self.step_source = step_source

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        severity = LOGGING_TO_SEVERITY.get(record.levelno, EventSeverity.INFO)

        log_entry = LogEntry(
            step=_record_step(record, self.step_source),
            wall_time=record.created,
            severity=severity,
            category=EventCategory.SYSTEM,
            message=record.getMessage(),
            component=self.component,
            source=record.name,
        )

        if record.exc_info:
            log_entry.data["exception"] = self.formatException(record.exc_info)

        return log_entry.to_json()


# ----------------------------------------------------------------
# Plant Logger
# ----------------------------------------------------------------


class PlantLogger:
    """
    Enhanced logger for plant components.

    Wraps Python's logging with plant-specific features:
    - Structured logging (JSON file output)
    - Event classification
    - Event trail for safety, alarm and maintenance events
    - Step-stamped records
    """

    def __init__(
        self,
        name: str,
        component: str = "",
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
        level: int = logging.INFO,
        max_trail_entries: int = 10000,
    ):
        """
        Initialise plant logger.

        Args:
            name: Logger name (typically module name)
            component: Component name for context
            log_dir: Directory for log files (None = no file logging)
            enable_json: Enable JSON formatted logs (requires log_dir)
            enable_console: Enable console output
            level: Minimum level passed to handlers
            max_trail_entries: Maximum event trail entries to retain
        """
        self.name = name
        self.component = component
        self.log_dir = log_dir
        self.step_source: Callable[[], int] = _no_step

        self.logger = logging.getLogger(name if not component else f"{name}.{component}")
        self.logger.setLevel(level)
        self.logger.propagate = False  # Don't propagate to root logger

        # The stdlib logger is shared by every PlantLogger of this name, so
        # handlers are replaced, not stacked
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if enable_console:
            self._add_console_handler()

        if enable_json and log_dir:
            self._add_json_handler()

        self.event_trail: list[LogEntry] = []
        self._trail_lock = threading.Lock()
        self._max_trail_entries = max_trail_entries

    def _add_console_handler(self) -> None:
        """Add console handler with plant step prefix."""
        handler = logging.StreamHandler()
        handler.setFormatter(StepFormatter())
        self.logger.addHandler(handler)

    def _add_json_handler(self) -> None:
        """Add JSON file handler with rotation."""
        if not self.log_dir:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / f"{self.component or 'plant'}.json.log"

        # Rotating file handler (10MB max, 5 backups)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        handler.setFormatter(JSONFormatter(component=self.component))
        self.logger.addHandler(handler)

    def bind_step_source(self, step_source: Callable[[], int]) -> None:
        """Stamp subsequent records with the step reported by step_source."""
        self.step_source = step_source

    def _stamped(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = dict(kwargs.pop("extra", None) or {})
        extra.setdefault("plant_step", self.step_source())
        kwargs["extra"] = extra
        return kwargs

    # ----------------------------------------------------------------
    # Standard logging methods
    # ----------------------------------------------------------------

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(message, **self._stamped(kwargs))

    # ----------------------------------------------------------------
    # Plant-specific logging methods
    # ----------------------------------------------------------------

    def log_event(
        self,
        severity: EventSeverity,
        category: EventCategory,
        message: str,
        **kwargs,
    ) -> LogEntry:
        """
        Log structured plant event.

        Args:
            severity: Event severity level
            category: Event category
            message: Event message
            **kwargs: Additional context (component, data)

        Returns:
            LogEntry that was created
        """
        component = kwargs.pop("component", self.component)

        entry = LogEntry(
            step=self.step_source(),
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=message,
            component=component,
            source=self.name,
            **kwargs,
        )

        self.logger.log(
            SEVERITY_TO_LOGGING.get(severity, logging.INFO),
            entry.to_human_readable(),
            extra={"plant_step": entry.step},
        )

        if category in TRAIL_CATEGORIES:
            with self._trail_lock:
                self.event_trail.append(entry)
                if len(self.event_trail) > self._max_trail_entries:
                    self.event_trail = self.event_trail[-self._max_trail_entries :]

        return entry

    def log_alarm(self, message: str, **kwargs) -> LogEntry:
        """Log an alarm (component damage)."""
        return self.log_event(
            severity=EventSeverity.WARNING,
            category=EventCategory.ALARM,
            message=message,
            **kwargs,
        )

    # ----------------------------------------------------------------
    # Event trail access
    # ----------------------------------------------------------------

    def get_event_trail(
        self,
        limit: int = 100,
        severity: EventSeverity | None = None,
        category: EventCategory | None = None,
    ) -> list[LogEntry]:
        """
        Get event trail entries.

        Args:
            limit: Maximum number of entries to return
            severity: Filter by severity
            category: Filter by category

        Returns:
            List of log entries (most recent last)
        """
        with self._trail_lock:
            entries = self.event_trail

            if severity:
                entries = [e for e in entries if e.severity == severity]
            if category:
                entries = [e for e in entries if e.category == category]

            return entries[-limit:]

    def clear_event_trail(self) -> int:
        """
        Clear event trail.

        Returns:
            Number of entries cleared
        """
        with self._trail_lock:
            count = len(self.event_trail)
            self.event_trail.clear()
            return count


# ----------------------------------------------------------------
# Logger factory
# ----------------------------------------------------------------

_default_log_dir: Path | None = None
_default_level: int = logging.INFO


def configure_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> None:
    """
    Configure global logging settings.

    Applies to loggers created after this call.

    Args:
        log_dir: Directory for JSON log files
        level: Logging level (int or name such as "DEBUG")
    """
    global _default_log_dir, _default_level

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        level = resolved

    _default_level = level


def get_logger(name: str, component: str = "", **kwargs) -> PlantLogger:
    """
    Create a plant logger with the configured defaults.

    Each call returns a new PlantLogger with its own step source and event
    trail, so two plants never share alarms or step stamps. Loggers with
    the same name and component write through the same handlers.

    Args:
        name: Logger name (typically __name__)
        component: Component name for context
        **kwargs: Additional PlantLogger arguments

    Returns:
        PlantLogger instance
    """
    if "log_dir" not in kwargs and _default_log_dir:
        kwargs["log_dir"] = _default_log_dir
    if "level" not in kwargs:
        kwargs["level"] = _default_level

    return PlantLogger(name, component, **kwargs)
