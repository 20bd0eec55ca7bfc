# plant/physics/turbine_physics.py
"""
Steam turbine and generator physics.

The turbine's shaft speed follows the steam flow arriving from its valve:
full speed at the valve's maximum throughput, linear below it. The
generator attached to the turbine converts shaft speed to power.
"""

import logging
from dataclasses import dataclass
from typing import Any

from plant.flow.flow import Flow
from plant.physics.base_physics_engine import FailablePhysicsEngine, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class TurbineState:
    """Current turbine state.

    Attributes:
        shaft_speed_rpm: Shaft speed from the last update
        steam_in: Steam rate received in the last update
    """

    shaft_speed_rpm: int = 0
    steam_in: int = 0


@dataclass
class TurbineParameters:
    """Turbine design parameters.

    Attributes:
        max_rpm: Shaft speed at full steam throughput
        max_throughput: Steam rate that drives the turbine at max_rpm
        repair_time: Steps a repair takes
    """

    max_rpm: int = 3500
    max_throughput: int = 300
    repair_time: int = 5


class TurbinePhysics(FailablePhysicsEngine):
    """
    Simulates a steam turbine.

    Example:
        >>> turbine = TurbinePhysics("turbine")
        >>> turbine.update(Flow(rate=150, temperature=300))
        >>> turbine.rpm
        1750
    """

    def __init__(self, name: str = "turbine", params: TurbineParameters | None = None):
        super().__init__(name, params or TurbineParameters())
        self.params: TurbineParameters
        self.state = TurbineState()

        logger.info(
            f"Turbine physics created: {name} "
            f"({self.params.max_rpm}RPM @ {self.params.max_throughput} steam)"
        )

    def update(self, inflow: Flow) -> None:
        """Set shaft speed from the steam arriving this step.

        Args:
            inflow: Steam flow from the upstream node
        """
        self.state.steam_in = inflow.rate
        if not self.operational or self.params.max_throughput <= 0:
            self.state.shaft_speed_rpm = 0
        else:
            self.state.shaft_speed_rpm = round_half_up(
                self.params.max_rpm * inflow.rate / self.params.max_throughput
            )

        logger.debug(f"{self.name}: RPM={self.state.shaft_speed_rpm} (steam {inflow.rate})")

    @property
    def rpm(self) -> int:
        """Shaft speed; zero while not operational."""
        return self.state.shaft_speed_rpm if self.operational else 0

    def get_state(self) -> TurbineState:
        return self.state

    def get_telemetry(self) -> dict[str, Any]:
        """Get turbine telemetry for monitoring."""
        return {
            "rpm": self.rpm,
            "steam_in": self.state.steam_in,
            "operational": self.operational,
        }


@dataclass
class GeneratorParameters:
    """Generator parameters.

    Attributes:
        rpm_per_power_unit: Turbine rpm needed per unit of power (integer division)
    """

    rpm_per_power_unit: int = 123


class GeneratorPhysics:
    """
    Generator driven by a turbine shaft. Stateless, never fails.

    Example:
        >>> generator = GeneratorPhysics(turbine)
        >>> generator.power_output
        14
    """

    def __init__(self, turbine: TurbinePhysics, params: GeneratorParameters | None = None):
        if turbine is None:
            raise ValueError("turbine cannot be None")
        self.turbine = turbine
        self.params = params or GeneratorParameters()

    @property
    def power_output(self) -> int:
        if self.params.rpm_per_power_unit <= 0:
            return 0
        return self.turbine.rpm // self.params.rpm_per_power_unit

    def get_telemetry(self) -> dict[str, Any]:
        return {"power_output": self.power_output, "turbine": self.turbine.name}
