"""Logging and event trail for the plant simulator."""

from plant.monitoring.logging_system import (
    EventCategory,
    EventSeverity,
    LogEntry,
    PlantLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "EventCategory",
    "EventSeverity",
    "LogEntry",
    "PlantLogger",
    "configure_logging",
    "get_logger",
]
