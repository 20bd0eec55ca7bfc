# plant/model/factory.py
"""
Plant construction from a topology description.

A topology is a plain mapping, as loaded from topology.yml:

    nodes:
      - {name: reactor, kind: reactor}
      - {name: connector_1, kind: connector}
      - {name: steam_valve_1, kind: valve, params: {max_throughput: 300}}
      ...
    connections:
      - [reactor, connector_1]
      ...
    coolant_pump: coolant_pump
    generator: {turbine: turbine}

Per-node "params" override the defaults for that node's kind.
"""

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Any

from plant.errors import TopologyError
from plant.flow.flow import Medium
from plant.flow.network import NodeKind, PlantNetwork
from plant.flow.propagator import FlowParameters
from plant.model.plant import SCORE_PER_POWER_UNIT, Plant
from plant.monitoring.logging_system import get_logger
from plant.physics.condenser_physics import CondenserParameters, CondenserPhysics
from plant.physics.pump_physics import PumpParameters, PumpPhysics
from plant.physics.reactor_physics import ReactorParameters, ReactorPhysics
from plant.physics.turbine_physics import (
    GeneratorParameters,
    GeneratorPhysics,
    TurbineParameters,
    TurbinePhysics,
)
from plant.physics.valve import ValveParameters, Valve


@dataclass
class PlantParameters:
    """Default parameters for every component kind.

    Attributes:
        reactor: Reactor parameters
        condenser: Condenser parameters
        pump: Feedwater pump parameters
        coolant_pump: Condenser coolant pump parameters
        valve: Valve parameters
        turbine: Turbine parameters
        generator: Generator parameters
        flow: Flow limits used by the propagator
        score_per_power_unit: Score per unit of generator power per step
    """

    reactor: ReactorParameters = field(default_factory=ReactorParameters)
    condenser: CondenserParameters = field(default_factory=CondenserParameters)
    pump: PumpParameters = field(default_factory=PumpParameters)
    coolant_pump: PumpParameters = field(default_factory=PumpParameters)
    valve: ValveParameters = field(default_factory=ValveParameters)
    turbine: TurbineParameters = field(default_factory=TurbineParameters)
    generator: GeneratorParameters = field(default_factory=GeneratorParameters)
    flow: FlowParameters = field(default_factory=FlowParameters)
    score_per_power_unit: int = SCORE_PER_POWER_UNIT


DEFAULT_TOPOLOGY: dict[str, Any] = {
    "nodes": [
        {"name": "reactor", "kind": "reactor"},
        {"name": "connector_1", "kind": "connector", "medium": "steam"},
        {"name": "steam_valve_1", "kind": "valve"},
        {"name": "turbine", "kind": "turbine"},
        {"name": "steam_valve_2", "kind": "valve"},
        {"name": "connector_2", "kind": "connector", "medium": "steam"},
        {"name": "condenser", "kind": "condenser"},
        {"name": "connector_3", "kind": "connector"},
        {"name": "pump_1", "kind": "pump"},
        {"name": "pump_2", "kind": "pump"},
        {"name": "connector_4", "kind": "connector"},
    ],
    "connections": [
        ["reactor", "connector_1"],
        ["connector_1", "steam_valve_1"],
        ["steam_valve_1", "turbine"],
        ["turbine", "connector_2"],
        ["connector_1", "steam_valve_2"],
        ["steam_valve_2", "connector_2"],
        ["connector_2", "condenser"],
        ["condenser", "connector_3"],
        ["connector_3", "pump_1"],
        ["connector_3", "pump_2"],
        ["pump_1", "connector_4"],
        ["pump_2", "connector_4"],
        ["connector_4", "reactor"],
    ],
    "coolant_pump": "coolant_pump",
    "generator": {"turbine": "turbine"},
}


def _with_overrides(defaults: Any, overrides: dict[str, Any] | None) -> Any:
    if not overrides:
        return defaults
    try:
        return dataclasses.replace(defaults, **overrides)
    except TypeError as e:
        raise TopologyError(f"Invalid parameter override {overrides}: {e}") from e


def build_plant(
    topology: dict[str, Any],
    params: PlantParameters | None = None,
) -> Plant:
    """Build a plant from a topology description.

    Args:
        topology: Mapping with nodes, connections, coolant_pump and generator
        params: Default parameters per component kind

    Returns:
        Plant with a frozen network

    Raises:
        TopologyError: If the description is malformed
    """
    params = params or PlantParameters()

    nodes = topology.get("nodes")
    if not nodes:
        raise TopologyError("topology must list at least one node")

    coolant_name = topology.get("coolant_pump") or "coolant_pump"
    coolant = PumpPhysics(coolant_name, params.coolant_pump)

    network = PlantNetwork()
    turbines: dict[str, TurbinePhysics] = {}

    for entry in nodes:
        name = entry.get("name")
        if not name:
            raise TopologyError(f"Node entry without a name: {entry!r}")
        try:
            kind = NodeKind(entry.get("kind"))
        except ValueError:
            raise TopologyError(f"Unknown node kind {entry.get('kind')!r} for '{name}'") from None
        overrides = entry.get("params")

        if kind is NodeKind.REACTOR:
            device = ReactorPhysics(name, _with_overrides(params.reactor, overrides))
        elif kind is NodeKind.CONDENSER:
            device = CondenserPhysics(
                name, coolant, _with_overrides(params.condenser, overrides)
            )
        elif kind is NodeKind.VALVE:
            device = Valve(name, _with_overrides(params.valve, overrides))
            if "open" in entry:
                device.set_open(entry["open"])
        elif kind is NodeKind.TURBINE:
            device = TurbinePhysics(name, _with_overrides(params.turbine, overrides))
            turbines[name] = device
        elif kind is NodeKind.PUMP:
            device = PumpPhysics(name, _with_overrides(params.pump, overrides))
        else:
            device = None

        medium = Medium(entry["medium"]) if "medium" in entry else None
        network.add_node(
            name,
            kind,
            device,
            medium=medium,
            input_slots=entry.get("input_slots", 0),
        )

    for connection in topology.get("connections", []):
        if len(connection) != 2:
            raise TopologyError(f"Connection must name two nodes, got {connection!r}")
        source, target = connection
        network.connect(
            network.node_by_name(source).index,
            network.node_by_name(target).index,
        )

    network.freeze()

    generator = None
    generator_entry = topology.get("generator")
    if generator_entry:
        turbine_name = generator_entry.get("turbine")
        if turbine_name not in turbines:
            raise TopologyError(f"Generator turbine '{turbine_name}' is not a turbine node")
        generator = GeneratorPhysics(turbines[turbine_name], params.generator)

    get_logger(__name__).info(
        f"Built plant: {len(network)} nodes, "
        f"{len(network.valves)} valves, {len(network.pumps)} pumps"
    )

    return Plant(
        network,
        generator=generator,
        flow_params=params.flow,
        score_per_power_unit=params.score_per_power_unit,
    )


def build_default_plant(params: PlantParameters | None = None) -> Plant:
    """Build the standard plant.

    reactor -> connector_1 -> {steam_valve_1 -> turbine, steam_valve_2}
    -> connector_2 -> condenser -> connector_3 -> {pump_1, pump_2}
    -> connector_4 -> reactor, with an off-graph coolant pump on the
    condenser and a generator on the turbine.
    """
    return build_plant(copy.deepcopy(DEFAULT_TOPOLOGY), params)
