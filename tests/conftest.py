# tests/conftest.py
"""Shared pytest fixtures for plant simulator tests.

This file provides common fixtures used across all test modules,
following the bottom-up testing strategy where foundation components
are tested with real dependencies wherever possible.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from plant.flow.network import NodeKind, PlantNetwork
from plant.model.factory import build_default_plant
from plant.physics.condenser_physics import CondenserPhysics
from plant.physics.pump_physics import PumpPhysics
from plant.physics.reactor_physics import ReactorPhysics
from plant.physics.turbine_physics import TurbinePhysics
from plant.physics.valve import Valve


# ----------------------------------------------------------------
# Configuration fixtures
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test configuration files.

    Yields:
        Path to temporary configuration directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture for writing YAML configuration files.

    Returns:
        Function that writes config dict to YAML file
    """

    def _write_config(config: dict, filename: str = "simulation.yml") -> Path:
        config_file = temp_config_dir / filename
        with open(config_file, "w") as f:
            yaml.dump(config, f)
        return config_file

    return _write_config


# ----------------------------------------------------------------
# Plant fixtures
# ----------------------------------------------------------------
@pytest.fixture
def default_plant():
    """Standard plant with default parameters."""
    return build_default_plant()


@pytest.fixture
def split_network():
    """Hand-built network with one connector splitting to two valves.

    reactor -> hub -> {valve_a, valve_b} -> merge -> condenser
    condenser -> pump -> reactor

    Returns:
        Function returning (network, indices) where indices maps names to
        node indices. The network is frozen.
    """

    def _create(valve_a_open: bool = True, valve_b_open: bool = True):
        network = PlantNetwork()
        coolant = PumpPhysics("coolant_pump")
        valve_a = Valve("valve_a")
        valve_b = Valve("valve_b")
        valve_a.set_open(valve_a_open)
        valve_b.set_open(valve_b_open)

        indices = {
            "reactor": network.add_node("reactor", NodeKind.REACTOR, ReactorPhysics("reactor")),
            "hub": network.add_node("hub", NodeKind.CONNECTOR),
            "valve_a": network.add_node("valve_a", NodeKind.VALVE, valve_a),
            "valve_b": network.add_node("valve_b", NodeKind.VALVE, valve_b),
            "merge": network.add_node("merge", NodeKind.CONNECTOR),
            "condenser": network.add_node(
                "condenser", NodeKind.CONDENSER, CondenserPhysics("condenser", coolant)
            ),
            "pump": network.add_node("pump", NodeKind.PUMP, PumpPhysics("pump")),
        }
        for source, target in [
            ("reactor", "hub"),
            ("hub", "valve_a"),
            ("hub", "valve_b"),
            ("valve_a", "merge"),
            ("valve_b", "merge"),
            ("merge", "condenser"),
            ("condenser", "pump"),
            ("pump", "reactor"),
        ]:
            network.connect(indices[source], indices[target])

        network.freeze()
        return network, indices

    return _create


@pytest.fixture
def turbine_factory():
    """Factory for TurbinePhysics instances."""

    def _create(name: str = "turbine", **kwargs):
        from plant.physics.turbine_physics import TurbineParameters

        return TurbinePhysics(name, TurbineParameters(**kwargs) if kwargs else None)

    return _create


def total_mass(plant) -> int:
    """Water counted at the 1:2 ratio plus steam, over reactor and condenser."""
    reactor = plant.reactor.state
    condenser = plant.condenser.state
    return (
        2 * (reactor.water_volume + condenser.water_volume)
        + reactor.steam_volume
        + condenser.steam_volume
    )


@pytest.fixture
def mass_of():
    """Conserved mass measure for a plant."""
    return total_mass
