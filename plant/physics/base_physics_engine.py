# plant/physics/base_physics_engine.py
"""
Base classes for plant component physics engines.

Provides common infrastructure for:
- Naming and parameter storage
- Structured logging through PlantLogger
- Failure and repair of failable components (pumps, turbines)
- Volumes, health and the one-shot fatal failure signal of the two
  pressurised components (reactor and condenser)

Every engine exposes get_state() and get_telemetry(). The plant calls
update() once per step in node order, then check_health() on the
pressurised engines.
"""

import math
from abc import ABC, abstractmethod
from typing import Any

from plant.errors import CriticalComponentFailure
from plant.monitoring.logging_system import (
    EventCategory,
    EventSeverity,
    PlantLogger,
    get_logger,
)

__all__ = [
    "BasePhysicsEngine",
    "FailablePhysicsEngine",
    "CriticalPhysicsEngine",
    "round_half_up",
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity.

    Python's round() uses banker's rounding; the plant model does not.

    >>> round_half_up(2.5), round_half_up(-2.5)
    (3, -2)
    """
    return math.floor(value + 0.5)


class BasePhysicsEngine(ABC):
    """
    Abstract base class for all component physics engines.

    Subclasses must implement:
    - get_state(): Return current state object
    - get_telemetry(): Return telemetry dictionary
    """

    def __init__(self, name: str, params: Any | None = None):
        """Initialise base physics engine.

        Args:
            name: Component name (reactor, pump_1, ...)
            params: Engine-specific parameters (typed in subclass)
        """
        if not name:
            raise ValueError("name cannot be empty")

        self.name = name
        self.params = params
        self.logger: PlantLogger = get_logger(self.__class__.__name__, component=name)

    # ----------------------------------------------------------------
    # State access (abstract)
    # ----------------------------------------------------------------

    @abstractmethod
    def get_state(self) -> Any:
        """Get current physics state object."""
        pass

    @abstractmethod
    def get_telemetry(self) -> dict[str, Any]:
        """Get current telemetry in dictionary format."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class FailablePhysicsEngine(BasePhysicsEngine):
    """
    Physics engine for a component that can break and be repaired.

    While not operational the component keeps its setpoints but contributes
    nothing (a failed pump moves no water, a failed turbine does not turn).
    """

    DEFAULT_REPAIR_TIME = 5

    def __init__(self, name: str, params: Any | None = None):
        super().__init__(name, params)
        self.operational = True

    @property
    def repair_time(self) -> int:
        """Steps a repair takes to complete."""
        return getattr(self.params, "repair_time", self.DEFAULT_REPAIR_TIME)

    def fail(self) -> None:
        """Take the component out of service."""
        if not self.operational:
            return
        self.operational = False
        self.logger.log_event(
            EventSeverity.WARNING,
            EventCategory.MAINTENANCE,
            f"{self.name} has failed",
        )

    def repair(self) -> None:
        """Return the component to service."""
        if self.operational:
            return
        self.operational = True
        self.logger.log_event(
            EventSeverity.NOTICE,
            EventCategory.MAINTENANCE,
            f"{self.name} repaired",
        )


class CriticalPhysicsEngine(BasePhysicsEngine):
    """
    Physics engine for a pressurised component.

    Subclass state objects must carry water_volume, steam_volume,
    temperature, pressure and health. Health may drop below zero; the
    failure signal fires once, the first time check_health() sees it at or
    below zero.
    """

    def __init__(self, name: str, params: Any | None = None):
        super().__init__(name, params)
        self.state: Any = None
        self._failure_signalled = False

    # ----------------------------------------------------------------
    # Volumes
    # ----------------------------------------------------------------

    def pump_in_water(self, amount: int) -> None:
        """Add water to the component.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"{self.name}: water pumped in cannot be negative ({amount})")
        self.state.water_volume += amount

    def pump_out_water(self, amount: int) -> None:
        """Remove water from the component, never below empty.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"{self.name}: water pumped out cannot be negative ({amount})")
        self.state.water_volume = max(0, self.state.water_volume - amount)

    def remove_steam(self, amount: int) -> None:
        """Remove steam from the component, never below empty.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"{self.name}: steam removed cannot be negative ({amount})")
        self.state.steam_volume = max(0, self.state.steam_volume - amount)

    # ----------------------------------------------------------------
    # Health
    # ----------------------------------------------------------------

    def _damage(self, amount: int, reason: str) -> None:
        self.state.health -= amount
        self.logger.log_alarm(
            f"{self.name} damaged: {reason} (health {self.state.health})",
            data={"reason": reason, "health": self.state.health},
        )

    def has_failed(self) -> bool:
        return self.state.health <= 0

    def check_health(self) -> None:
        """Signal fatal failure the first time health is at or below zero.

        Raises:
            CriticalComponentFailure: Once, on the first call after health
                reached zero
        """
        if not self.has_failed() or self._failure_signalled:
            return

        self._failure_signalled = True
        self.logger.log_event(
            EventSeverity.CRITICAL,
            EventCategory.SAFETY,
            f"{self.name} has failed (health {self.state.health})",
            data={"health": self.state.health},
        )
        raise CriticalComponentFailure(self.name, self.state.health)

    def _pressure_from_steam(self, multiplier: float) -> int:
        return round_half_up(self.state.steam_volume * multiplier)
