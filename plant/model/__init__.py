# plant/model/__init__.py
"""
Plant model: step loop, setpoints, failure/repair hooks and construction.
"""

from plant.model.factory import (
    DEFAULT_TOPOLOGY,
    PlantParameters,
    build_default_plant,
    build_plant,
)
from plant.model.plant import Plant
from plant.model.repair import Repair, RepairSchedule

__all__ = [
    "DEFAULT_TOPOLOGY",
    "Plant",
    "PlantParameters",
    "Repair",
    "RepairSchedule",
    "build_default_plant",
    "build_plant",
]
