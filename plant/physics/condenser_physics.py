# plant/physics/condenser_physics.py
"""
Condenser physics simulation.

Models the pressurised condenser:
- Heating from steam arriving from the reactor
- Coolant-driven cooldown, bounded by the coolant inlet temperature
- Condensation (2 steam : 1 water), faster when cooler
- Pressure derived from steam volume
- Structural damage at or above the temperature and pressure limits

The coolant pump is not part of the flow graph; the condenser holds a
reference to it and reads its effective rpm.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from plant.physics.base_physics_engine import CriticalPhysicsEngine, round_half_up
from plant.physics.pump_physics import PumpPhysics

logger = logging.getLogger(__name__)


@dataclass
class CondenserState:
    """Current condenser physical state.

    Attributes:
        water_volume: Water held in the condenser
        steam_volume: Steam held in the condenser
        temperature: Condenser temperature in Celsius
        pressure: Derived from steam volume
        health: Structural health (100 = intact, <= 0 = failed)
        steam_in: Steam received this step
        steam_in_temperature: Temperature of the steam received this step
    """

    water_volume: int = 2000
    steam_volume: int = 0
    temperature: int = 50
    pressure: int = 0
    health: int = 100
    steam_in: int = 0
    steam_in_temperature: int = 0


@dataclass
class CondenserParameters:
    """Condenser design parameters.

    Attributes:
        initial_water_volume: Water at start
        initial_steam_volume: Steam at start
        initial_temperature: Temperature at start
        initial_health: Health at start
        max_temperature: Damage at or above this; no condensation above it
        max_pressure: Damage at or above this
        coolant_temperature: Coolant inlet temperature (cooling floor)
        max_cooldown_per_step: Cooling with the coolant pump at max rpm
        water_steam_ratio: Steam consumed per unit of water created
        condensation_multiplier: Steam condensed per degree below max_temperature
        volume_to_pressure: Pressure per unit of steam
        health_loss_per_violation: Health lost for each violated limit per step
    """

    initial_water_volume: int = 2000
    initial_steam_volume: int = 0
    initial_temperature: int = 50
    initial_health: int = 100
    max_temperature: int = 2000
    max_pressure: int = 2000
    coolant_temperature: int = 20
    max_cooldown_per_step: int = 500
    water_steam_ratio: int = 2
    condensation_multiplier: float = 2
    volume_to_pressure: float = 0.15
    health_loss_per_violation: int = 5


class CondenserPhysics(CriticalPhysicsEngine):
    """
    Simulates the condenser.

    Steam arrives through add_steam() during the flow transfer; update()
    then heats, cools and condenses. Water leaves via pump_out_water().

    Example:
        >>> coolant = PumpPhysics("coolant_pump")
        >>> condenser = CondenserPhysics("condenser", coolant)
        >>> condenser.add_steam(200, 400)
        >>> condenser.update()
    """

    def __init__(
        self,
        name: str = "condenser",
        coolant_pump: PumpPhysics | None = None,
        params: CondenserParameters | None = None,
    ):
        """Initialise condenser physics engine.

        Args:
            name: Component name
            coolant_pump: Pump supplying coolant (a fresh one if None)
            params: Condenser parameters (uses defaults if None)
        """
        super().__init__(name, params or CondenserParameters())
        self.params: CondenserParameters
        self.coolant_pump = coolant_pump or PumpPhysics(f"{name}_coolant_pump")

        self.state = CondenserState(
            water_volume=self.params.initial_water_volume,
            steam_volume=self.params.initial_steam_volume,
            temperature=self.params.initial_temperature,
            health=self.params.initial_health,
        )
        self.state.pressure = self._pressure_from_steam(self.params.volume_to_pressure)

        logger.info(
            f"Condenser physics created: {name} "
            f"(water {self.state.water_volume}, coolant {self.coolant_pump.name})"
        )

    # ----------------------------------------------------------------
    # Volumes
    # ----------------------------------------------------------------

    def add_steam(self, amount: int, temperature: int) -> None:
        """Receive steam for this step.

        Args:
            amount: Steam volume arriving
            temperature: Temperature of the arriving steam

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"{self.name}: steam added cannot be negative ({amount})")
        self.state.steam_volume += amount
        self.state.steam_in = amount
        self.state.steam_in_temperature = temperature

    # ----------------------------------------------------------------
    # Physics simulation
    # ----------------------------------------------------------------

    def update(self) -> None:
        """Update condenser physics for one step."""
        heating = self._heating()
        cooldown = self._cooldown()
        self.state.temperature += heating - cooldown

        condensed = self._condense()
        self.state.pressure = self._pressure_from_steam(self.params.volume_to_pressure)
        self._check_damage()

        self.state.steam_in = 0
        self.state.steam_in_temperature = 0

        logger.debug(
            f"{self.name}: T={self.state.temperature} P={self.state.pressure} "
            f"water={self.state.water_volume} steam={self.state.steam_volume} "
            f"(heating {heating}, cooldown {cooldown}, condensed {condensed})"
        )

    def _heating(self) -> int:
        """Heating from arriving steam.

        The old-steam share is taken with integer division, so any steam
        arriving brings the condenser up to the steam temperature.
        """
        steam = self.state.steam_volume
        if steam < 1 or self.state.steam_in == 0:
            return 0
        difference = self.state.steam_in_temperature - self.state.temperature
        return difference * (1 - (steam - self.state.steam_in) // steam)

    def _cooldown(self) -> int:
        max_rpm = self.coolant_pump.max_rpm
        if max_rpm <= 0:
            amount = 0
        else:
            amount = round_half_up(
                self.params.max_cooldown_per_step * self.coolant_pump.rpm / max_rpm
            )

        if self.state.temperature - amount > self.params.coolant_temperature:
            return amount
        return self.state.temperature - self.params.coolant_temperature

    def _condense(self) -> int:
        if self.state.temperature < self.params.max_temperature:
            condensed = math.ceil(
                (self.params.max_temperature - self.state.temperature)
                * self.params.condensation_multiplier
            )
        else:
            condensed = 0

        ratio = self.params.water_steam_ratio
        water_created = min(condensed, self.state.steam_volume) // ratio
        self.state.steam_volume -= water_created * ratio
        self.state.water_volume += water_created
        return water_created * ratio

    def _check_damage(self) -> None:
        loss = self.params.health_loss_per_violation
        if self.state.temperature >= self.params.max_temperature:
            self._damage(loss, f"temperature {self.state.temperature}C at limit")
        if self.state.pressure >= self.params.max_pressure:
            self._damage(loss, f"pressure {self.state.pressure} at limit")

    # ----------------------------------------------------------------
    # State access
    # ----------------------------------------------------------------

    def get_state(self) -> CondenserState:
        return self.state

    def get_telemetry(self) -> dict[str, Any]:
        """Get condenser telemetry for monitoring."""
        return {
            "temperature": self.state.temperature,
            "pressure": self.state.pressure,
            "water_volume": self.state.water_volume,
            "steam_volume": self.state.steam_volume,
            "health": self.state.health,
            "coolant_pump_rpm": self.coolant_pump.rpm,
            "failed": self.has_failed(),
        }
