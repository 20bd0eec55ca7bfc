# plant/model/repair.py
"""
Repair countdowns for failed components.

A repair starts at the component's repair_time and counts down once at the
start of every step. When it reaches zero the component is operational
again for that step.
"""

from dataclasses import dataclass

from plant.physics.base_physics_engine import FailablePhysicsEngine


@dataclass
class Repair:
    """A repair in progress.

    Attributes:
        component: Component being repaired
        steps_remaining: Steps until the component returns to service
    """

    component: FailablePhysicsEngine
    steps_remaining: int

    def tick(self) -> bool:
        """Count down one step. Returns True when the repair is complete."""
        if self.steps_remaining > 0:
            self.steps_remaining -= 1
        return self.steps_remaining == 0


class RepairSchedule:
    """Repairs in progress, keyed by component name."""

    def __init__(self):
        self._repairs: dict[str, Repair] = {}

    def start(self, component: FailablePhysicsEngine) -> bool:
        """Begin repairing a failed component.

        Returns:
            False if the component is operational or already being repaired
        """
        if component.operational or component.name in self._repairs:
            return False
        self._repairs[component.name] = Repair(component, component.repair_time)
        return True

    def advance(self) -> list[FailablePhysicsEngine]:
        """Tick every repair and return the components brought back to service."""
        finished = [repair for repair in self._repairs.values() if repair.tick()]
        for repair in finished:
            del self._repairs[repair.component.name]
            repair.component.repair()
        return [repair.component for repair in finished]

    def is_repairing(self, name: str) -> bool:
        return name in self._repairs

    def steps_remaining(self, name: str) -> int | None:
        repair = self._repairs.get(name)
        return None if repair is None else repair.steps_remaining

    def __len__(self) -> int:
        return len(self._repairs)
