"""
Flow value attached to the outgoing edge of every plant node.

A Flow is recomputed from scratch each step: the propagator zeroes every flow
and rebuilds rate and temperature from the reactor and condenser outward.
"""

from enum import Enum


class Medium(Enum):
    """What is moving through a pipe."""

    WATER = "water"
    STEAM = "steam"


class Flow:
    """Rate and temperature of water or steam leaving a node.

    Negative assignments to rate or temperature are ignored and the previous
    value is kept.

    Example:
        >>> flow = Flow(medium=Medium.STEAM)
        >>> flow.rate = 120
        >>> flow.rate = -5
        >>> flow.rate
        120
    """

    __slots__ = ("_rate", "_temperature", "medium")

    def __init__(self, rate: int = 0, temperature: int = 0, medium: Medium = Medium.WATER):
        self._rate = 0
        self._temperature = 0
        self.medium = medium
        self.rate = rate
        self.temperature = temperature

    @property
    def rate(self) -> int:
        return self._rate

    @rate.setter
    def rate(self, value: int) -> None:
        if value >= 0:
            self._rate = int(value)

    @property
    def temperature(self) -> int:
        return self._temperature

    @temperature.setter
    def temperature(self, value: int) -> None:
        if value >= 0:
            self._temperature = int(value)

    def reset(self) -> None:
        """Zero rate and temperature; the medium is a property of the pipe."""
        self._rate = 0
        self._temperature = 0

    def copy_from(self, other: "Flow") -> None:
        self.rate = other.rate
        self.temperature = other.temperature

    def as_dict(self) -> dict:
        return {
            "rate": self._rate,
            "temperature": self._temperature,
            "medium": self.medium.value,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Flow):
            return NotImplemented
        return (
            self._rate == other._rate
            and self._temperature == other._temperature
            and self.medium is other.medium
        )

    def __repr__(self) -> str:
        return (
            f"Flow(rate={self._rate}, temperature={self._temperature}, "
            f"medium={self.medium.name})"
        )
