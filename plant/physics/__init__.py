# plant/physics/__init__.py
"""
Physics engines for plant components.

This module provides the per-step physical models:
- Reactor core (heating, evaporation, pressure, damage, quench)
- Condenser (steam heating, coolant cooldown, condensation, damage)
- Turbine shaft speed and generator power
- Pumps and valves
"""

from plant.physics.base_physics_engine import (
    BasePhysicsEngine,
    CriticalPhysicsEngine,
    FailablePhysicsEngine,
    round_half_up,
)
from plant.physics.condenser_physics import (
    CondenserParameters,
    CondenserPhysics,
    CondenserState,
)
from plant.physics.pump_physics import PumpParameters, PumpPhysics, PumpState
from plant.physics.reactor_physics import (
    ReactorParameters,
    ReactorPhysics,
    ReactorState,
)
from plant.physics.turbine_physics import (
    GeneratorParameters,
    GeneratorPhysics,
    TurbineParameters,
    TurbinePhysics,
    TurbineState,
)
from plant.physics.valve import Valve, ValveParameters

__all__ = [
    # Base
    "BasePhysicsEngine",
    "CriticalPhysicsEngine",
    "FailablePhysicsEngine",
    "round_half_up",
    # Reactor
    "ReactorPhysics",
    "ReactorState",
    "ReactorParameters",
    # Condenser
    "CondenserPhysics",
    "CondenserState",
    "CondenserParameters",
    # Turbine
    "TurbinePhysics",
    "TurbineState",
    "TurbineParameters",
    "GeneratorPhysics",
    "GeneratorParameters",
    # Pump and valve
    "PumpPhysics",
    "PumpState",
    "PumpParameters",
    "Valve",
    "ValveParameters",
]
