# plant/physics/pump_physics.py
"""
Water pump model.

Pumps move feedwater from the condenser back to the reactor; the coolant
pump drives condenser cooling. Flow is linear in rpm.
"""

import logging
from dataclasses import dataclass
from typing import Any

from plant.physics.base_physics_engine import FailablePhysicsEngine, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class PumpState:
    """Current pump state.

    Attributes:
        rpm_setpoint: Requested speed, kept while the pump is off or failed
        on: Power switch
    """

    rpm_setpoint: int = 0
    on: bool = True


@dataclass
class PumpParameters:
    """Pump design parameters.

    Attributes:
        max_rpm: Highest accepted rpm setpoint
        default_rpm: Setpoint at start
        default_on: Power switch at start
        repair_time: Steps a repair takes
    """

    max_rpm: int = 1000
    default_rpm: int = 0
    default_on: bool = True
    repair_time: int = 5


class PumpPhysics(FailablePhysicsEngine):
    """
    Simulates a water pump.

    Example:
        >>> pump = PumpPhysics("pump_1")
        >>> pump.set_rpm(500)
        >>> pump.flow_rate(400)
        200
    """

    def __init__(self, name: str, params: PumpParameters | None = None):
        super().__init__(name, params or PumpParameters())
        self.params: PumpParameters
        if not 0 <= self.params.default_rpm <= self.params.max_rpm:
            raise ValueError(
                f"default_rpm must be in [0, {self.params.max_rpm}], got {self.params.default_rpm}"
            )
        self.state = PumpState(rpm_setpoint=self.params.default_rpm, on=self.params.default_on)

    @property
    def max_rpm(self) -> int:
        return self.params.max_rpm

    @property
    def rpm(self) -> int:
        """Effective rpm: zero while switched off or not operational."""
        if not self.state.on or not self.operational:
            return 0
        return self.state.rpm_setpoint

    @property
    def is_on(self) -> bool:
        return self.state.on

    def set_rpm(self, rpm: int) -> None:
        """Set the rpm setpoint. A non-zero setpoint switches the pump on.

        Raises:
            ValueError: If rpm is outside [0, max_rpm]
        """
        if not 0 <= rpm <= self.params.max_rpm:
            raise ValueError(f"Pump rpm must be in the range [0, {self.params.max_rpm}], got {rpm}")
        self.state.rpm_setpoint = int(rpm)
        if rpm != 0:
            self.state.on = True
        self.logger.info(f"{self.name} rpm set to {rpm}")

    def set_on(self, on: bool) -> None:
        self.state.on = bool(on)
        self.logger.info(f"{self.name} switched {'on' if on else 'off'}")

    def flow_rate(self, max_flow: int) -> int:
        """Water moved per step at the current effective rpm.

        Args:
            max_flow: Flow at max rpm
        """
        if self.params.max_rpm <= 0:
            return 0
        return round_half_up(max_flow * self.rpm / self.params.max_rpm)

    def get_state(self) -> PumpState:
        return self.state

    def get_telemetry(self) -> dict[str, Any]:
        return {
            "rpm": self.rpm,
            "rpm_setpoint": self.state.rpm_setpoint,
            "on": self.state.on,
            "operational": self.operational,
        }
