"""
Config loader module for modular YAML configuration.
"""

import copy
import dataclasses
from pathlib import Path

import yaml

from plant.model.factory import DEFAULT_TOPOLOGY, PlantParameters

PARAMETER_SECTIONS = (
    "reactor",
    "condenser",
    "pump",
    "coolant_pump",
    "valve",
    "turbine",
    "generator",
    "flow",
)

DEFAULT_SIMULATION = {
    "steps": 10,
    "log_level": "INFO",
    "log_dir": None,
}


class ConfigLoader:
    """Loads and merges modular configuration files."""

    def __init__(self, config_dir="config"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_all(self):
        """Load all configuration files and merge them."""
        config = {}

        # Load component parameters
        plant_path = self.config_dir / "plant.yml"
        if plant_path.exists():
            with open(plant_path) as f:
                plant_data = yaml.safe_load(f) or {}
                config["plant"] = plant_data.get("plant", {}) or {}
        else:
            config["plant"] = {}

        # Load topology
        topology_path = self.config_dir / "topology.yml"
        if topology_path.exists():
            with open(topology_path) as f:
                topology_data = yaml.safe_load(f) or {}
                config["topology"] = topology_data.get("topology") or self._create_default_topology()
        else:
            config["topology"] = self._create_default_topology()
            self._save_topology(config["topology"])

        # Load simulation config
        simulation_path = self.config_dir / "simulation.yml"
        if simulation_path.exists():
            with open(simulation_path) as f:
                simulation_data = yaml.safe_load(f) or {}
                config["simulation"] = {
                    **DEFAULT_SIMULATION,
                    **(simulation_data.get("simulation", {}) or {}),
                }
        else:
            config["simulation"] = dict(DEFAULT_SIMULATION)

        return config

    def _create_default_topology(self):
        """Create default plant topology."""
        return copy.deepcopy(DEFAULT_TOPOLOGY)

    def _save_topology(self, topology):
        """Save topology configuration to file."""
        topology_path = self.config_dir / "topology.yml"
        with open(topology_path, "w") as f:
            yaml.dump({"topology": topology}, f, default_flow_style=False, sort_keys=False)
        print(f"[INFO] Created default topology config at {topology_path}")


def parameters_from_config(plant_config):
    """Build PlantParameters from the "plant" section of the config.

    Each section overrides the matching parameter dataclass field by field.

    Raises:
        ValueError: On an unknown section or parameter name
    """
    params = PlantParameters()
    plant_config = plant_config or {}

    for section, values in plant_config.items():
        if section == "score_per_power_unit":
            params.score_per_power_unit = int(values)
            continue
        if section not in PARAMETER_SECTIONS:
            raise ValueError(f"Unknown plant config section: {section}")

        defaults = getattr(params, section)
        known = {f.name for f in dataclasses.fields(defaults)}
        unknown = set(values or {}) - known
        if unknown:
            raise ValueError(f"Unknown {section} parameters: {sorted(unknown)}")
        setattr(params, section, dataclasses.replace(defaults, **(values or {})))

    return params
