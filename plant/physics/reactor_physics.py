# plant/physics/reactor_physics.py
"""
Reactor core physics simulation.

Models the pressurised core:
- Heating from the control rod position
- Cooldown from feedwater pumped in this step
- Evaporation above the boiling point (1 water : 2 steam)
- Pressure derived from steam volume
- Structural damage from over-temperature, over-pressure and low water
- One-shot emergency quench

All quantities are integers; every rounding goes through round_half_up.
"""

import logging
from dataclasses import dataclass
from typing import Any

from plant.flow.flow import Flow
from plant.monitoring.logging_system import EventCategory, EventSeverity
from plant.physics.base_physics_engine import CriticalPhysicsEngine, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class ReactorState:
    """Current reactor physical state.

    Attributes:
        water_volume: Water held in the core
        steam_volume: Steam held in the core
        temperature: Core temperature in Celsius
        pressure: Derived from steam volume
        health: Structural health (100 = intact, <= 0 = failed)
        control_rods: Percentage the control rods are lowered (100 = fully in)
        water_pumped_in: Feedwater received this step
        quench_available: False once the quench has been used
    """

    water_volume: int = 8000
    steam_volume: int = 0
    temperature: int = 50
    pressure: int = 0
    health: int = 100
    control_rods: int = 100
    water_pumped_in: int = 0
    quench_available: bool = True


@dataclass
class ReactorParameters:
    """Reactor design parameters.

    Attributes:
        initial_water_volume: Water in the core at start
        initial_steam_volume: Steam in the core at start
        initial_temperature: Core temperature at start
        initial_health: Health at start
        initial_control_rods: Rod position at start (percent lowered)
        max_temperature: Damage above this (uranium oxide melting point)
        max_pressure: Damage above this
        max_heating_per_step: Heating with rods fully raised
        min_safe_water_volume: Damage below this; heating doubles at or below it
        unsafe_heating_multiplier: Heating multiplier in the low-water condition
        water_steam_ratio: Steam produced per unit of water evaporated
        health_loss_per_violation: Health lost for each violated limit per step
        evaporation_multiplier: Water evaporated per degree above zero
        volume_to_pressure: Pressure per unit of steam
        boiling_point: No evaporation at or below this temperature
        quench_steam_fraction: Share of steam condensed by a quench
        quench_temperature: Core temperature after a quench
    """

    initial_water_volume: int = 8000
    initial_steam_volume: int = 0
    initial_temperature: int = 50
    initial_health: int = 100
    initial_control_rods: int = 100
    max_temperature: int = 2865
    max_pressure: int = 2000
    max_heating_per_step: int = 100
    min_safe_water_volume: int = 2000
    unsafe_heating_multiplier: int = 2
    water_steam_ratio: int = 2
    health_loss_per_violation: int = 10
    evaporation_multiplier: float = 0.2
    volume_to_pressure: float = 0.15
    boiling_point: int = 285
    quench_steam_fraction: float = 0.9
    quench_temperature: int = 50


class ReactorPhysics(CriticalPhysicsEngine):
    """
    Simulates the reactor core.

    The core receives feedwater through pump_in_water() (called by the flow
    transfer) and the inflow temperature through update(). Steam leaves via
    remove_steam().

    Example:
        >>> reactor = ReactorPhysics("reactor")
        >>> reactor.set_control_rods(40)
        >>> reactor.update(Flow(rate=0, temperature=50))
        >>> reactor.state.temperature
        110
    """

    def __init__(self, name: str = "reactor", params: ReactorParameters | None = None):
        """Initialise reactor physics engine.

        Args:
            name: Component name
            params: Reactor parameters (uses defaults if None)
        """
        super().__init__(name, params or ReactorParameters())
        self.params: ReactorParameters
        if not 0 <= self.params.initial_control_rods <= 100:
            raise ValueError(
                f"initial_control_rods must be in [0, 100], got {self.params.initial_control_rods}"
            )

        self.state = ReactorState(
            water_volume=self.params.initial_water_volume,
            steam_volume=self.params.initial_steam_volume,
            temperature=self.params.initial_temperature,
            health=self.params.initial_health,
            control_rods=self.params.initial_control_rods,
        )
        self.state.pressure = self._pressure_from_steam(self.params.volume_to_pressure)

        logger.info(
            f"Reactor physics created: {name} "
            f"(water {self.state.water_volume}, max {self.params.max_temperature}C)"
        )

    # ----------------------------------------------------------------
    # Physics simulation
    # ----------------------------------------------------------------

    def update(self, inflow: Flow) -> None:
        """Update core physics for one step.

        Args:
            inflow: Feedwater flow arriving at the core this step
        """
        heating = self._heating()
        cooldown = self._cooldown(inflow.temperature)
        self.state.temperature += heating - cooldown

        self._evaporate()
        self.state.pressure = self._pressure_from_steam(self.params.volume_to_pressure)
        self._check_damage()

        self.state.water_pumped_in = 0

        logger.debug(
            f"{self.name}: T={self.state.temperature} P={self.state.pressure} "
            f"water={self.state.water_volume} steam={self.state.steam_volume} "
            f"(heating {heating}, cooldown {cooldown})"
        )

    def _heating(self) -> int:
        max_heating = self.params.max_heating_per_step
        if self.state.water_volume <= self.params.min_safe_water_volume:
            max_heating *= self.params.unsafe_heating_multiplier
        return round_half_up(max_heating * (1 - self.state.control_rods / 100))

    def _cooldown(self, inflow_temperature: int) -> int:
        """Cooling from the share of the core that is fresh feedwater."""
        water = self.state.water_volume
        if water < 1:
            return 0
        replaced = 1 - (water - self.state.water_pumped_in) / water
        return round_half_up((self.state.temperature - inflow_temperature) * replaced)

    def _evaporate(self) -> None:
        if self.state.temperature <= self.params.boiling_point:
            return
        evaporated = min(
            round_half_up(self.state.temperature * self.params.evaporation_multiplier),
            self.state.water_volume,
        )
        self.state.water_volume -= evaporated
        self.state.steam_volume += evaporated * self.params.water_steam_ratio

    def _check_damage(self) -> None:
        loss = self.params.health_loss_per_violation
        if self.state.temperature > self.params.max_temperature:
            self._damage(loss, f"temperature {self.state.temperature}C over limit")
        if self.state.pressure > self.params.max_pressure:
            self._damage(loss, f"pressure {self.state.pressure} over limit")
        if self.state.water_volume < self.params.min_safe_water_volume:
            self._damage(loss, f"water volume {self.state.water_volume} below safe level")

    # ----------------------------------------------------------------
    # Volumes
    # ----------------------------------------------------------------

    def pump_in_water(self, amount: int) -> None:
        """Add feedwater; the amount drives this step's cooldown."""
        super().pump_in_water(amount)
        self.state.water_pumped_in = amount

    def add_steam(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"{self.name}: steam added cannot be negative ({amount})")
        self.state.steam_volume += amount

    # ----------------------------------------------------------------
    # Control
    # ----------------------------------------------------------------

    def set_control_rods(self, percent: int) -> None:
        """Set how far the control rods are lowered.

        Args:
            percent: 0 (fully raised, maximum heating) to 100 (fully lowered)

        Raises:
            ValueError: If percent is outside [0, 100]
        """
        if not 0 <= percent <= 100:
            raise ValueError(f"Control rod percentage must be in [0, 100], got {percent}")
        self.state.control_rods = int(percent)
        self.logger.info(f"Control rods set to {percent}% lowered")

    @property
    def quench_available(self) -> bool:
        return self.state.quench_available

    def quench(self) -> bool:
        """Emergency quench: condense most of the steam and drop the temperature.

        Usable once per game.

        Returns:
            True if the quench ran, False if it was already used
        """
        if not self.state.quench_available:
            logger.debug(f"{self.name}: quench already used")
            return False

        ratio = self.params.water_steam_ratio
        condensed = round_half_up(self.state.steam_volume * self.params.quench_steam_fraction)
        water_gained = condensed // ratio

        self.state.steam_volume -= water_gained * ratio
        self.state.water_volume += water_gained
        self.state.temperature = self.params.quench_temperature
        self.state.pressure = self._pressure_from_steam(self.params.volume_to_pressure)
        self.state.quench_available = False

        self.logger.log_event(
            EventSeverity.NOTICE,
            EventCategory.SAFETY,
            f"{self.name} quenched: {water_gained} water recovered",
            data={"water_gained": water_gained},
        )
        return True

    # ----------------------------------------------------------------
    # State access
    # ----------------------------------------------------------------

    def get_state(self) -> ReactorState:
        return self.state

    def get_telemetry(self) -> dict[str, Any]:
        """Get reactor telemetry for monitoring."""
        return {
            "temperature": self.state.temperature,
            "pressure": self.state.pressure,
            "water_volume": self.state.water_volume,
            "steam_volume": self.state.steam_volume,
            "health": self.state.health,
            "control_rods": self.state.control_rods,
            "quench_available": self.state.quench_available,
            "failed": self.has_failed(),
        }
