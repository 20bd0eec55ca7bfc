"""
Exceptions raised by the plant simulator.

Invalid setpoints (rod percentage, pump rpm, negative transfer volumes) are
rejected with a plain ValueError at the point of mutation. The classes below
cover the conditions callers need to tell apart.
"""


class PlantError(Exception):
    """Base exception for all plant simulator errors."""

    pass


class TopologyError(PlantError, ValueError):
    """Plant graph built or addressed incorrectly.

    Raised for construction bugs such as re-linking a port, marking an edge
    blocked that is not registered on a connector, or a plant without a
    reactor/condenser.
    """

    pass


class CriticalComponentFailure(PlantError):
    """A pressurised component's health reached zero. The game is over."""

    def __init__(self, component: str, health: int):
        super().__init__(f"{component} failed (health {health})")
        self.component = component
        self.health = health


class FlowConvergenceError(PlantError, RuntimeError):
    """Connector flow resolution did not settle within its pass bound."""

    pass
