# plant/flow/__init__.py
"""
Flow graph for the plant.

- Flow: rate/temperature value on every node's outgoing edge
- PlantNetwork: integer-indexed node table with connector blocked flags
- BlockageResolver: closed valves -> blocked connector edges
- FlowPropagator: steam pass, water pass, connector fixpoint, transfer
"""

from plant.flow.blockage import BlockageResolver
from plant.flow.flow import Flow, Medium
from plant.flow.network import NodeKind, PlantNetwork, PlantNode
from plant.flow.propagator import FlowParameters, FlowPropagator

__all__ = [
    "BlockageResolver",
    "Flow",
    "FlowParameters",
    "FlowPropagator",
    "Medium",
    "NodeKind",
    "PlantNetwork",
    "PlantNode",
]
