# plant/physics/valve.py
"""Steam and water valves."""

from dataclasses import dataclass
from typing import Any

from plant.physics.base_physics_engine import BasePhysicsEngine


@dataclass
class ValveParameters:
    """Valve design parameters.

    Attributes:
        max_throughput: Most flow the valve passes per step
        default_open: Position at start
    """

    max_throughput: int = 300
    default_open: bool = True


class Valve(BasePhysicsEngine):
    """
    Open/closed valve. Valves never fail.

    A closed valve blocks the connector edge leading toward it; see
    BlockageResolver.
    """

    def __init__(self, name: str, params: ValveParameters | None = None):
        super().__init__(name, params or ValveParameters())
        self.params: ValveParameters
        self.is_open = self.params.default_open

    @property
    def max_throughput(self) -> int:
        return self.params.max_throughput

    def open(self) -> None:
        self.set_open(True)

    def close(self) -> None:
        self.set_open(False)

    def set_open(self, is_open: bool) -> None:
        is_open = bool(is_open)
        if is_open != self.is_open:
            self.logger.info(f"{self.name} {'opened' if is_open else 'closed'}")
        self.is_open = is_open

    def get_state(self) -> bool:
        return self.is_open

    def get_telemetry(self) -> dict[str, Any]:
        return {"open": self.is_open, "max_throughput": self.max_throughput}
