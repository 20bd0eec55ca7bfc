"""
Node table for the plant flow graph.

Every plant node lives in a single table and is addressed by its integer
index. Non-connector nodes hold one upstream and one downstream index;
connector (branch) nodes hold an ordered list of input slots and a map of
downstream index -> blocked flag. The links are set while building the
plant; after freeze() only blocked flags and flows change.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from plant.errors import TopologyError
from plant.flow.flow import Flow, Medium

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Tag for the kind of component a node represents."""

    REACTOR = "reactor"
    CONDENSER = "condenser"
    VALVE = "valve"
    TURBINE = "turbine"
    PUMP = "pump"
    CONNECTOR = "connector"


PRESSURISED_KINDS = frozenset({NodeKind.REACTOR, NodeKind.CONDENSER})

DEFAULT_MEDIUM = {
    NodeKind.REACTOR: Medium.STEAM,
    NodeKind.CONDENSER: Medium.WATER,
    NodeKind.VALVE: Medium.STEAM,
    NodeKind.TURBINE: Medium.STEAM,
    NodeKind.PUMP: Medium.WATER,
    NodeKind.CONNECTOR: Medium.WATER,
}


@dataclass
class PlantNode:
    """One entry in the node table.

    Attributes:
        index: Position in the node table
        name: Unique component name
        kind: Node kind tag
        device: Physics object for the node (None for connectors)
        flow_out: Flow leaving this node
        upstream: Index of the single upstream node (non-connectors)
        downstream: Index of the single downstream node (non-connectors)
        inputs: Ordered input slots (connectors); a slot may be empty
        outputs: Downstream index -> blocked flag (connectors)
    """

    index: int
    name: str
    kind: NodeKind
    device: Any = None
    flow_out: Flow = field(default_factory=Flow)
    upstream: int | None = None
    downstream: int | None = None
    inputs: list[int | None] = field(default_factory=list)
    outputs: dict[int, bool] = field(default_factory=dict)

    @property
    def pressurised(self) -> bool:
        return self.kind in PRESSURISED_KINDS

    @property
    def is_connector(self) -> bool:
        return self.kind is NodeKind.CONNECTOR


class PlantNetwork:
    """
    Central node table plus adjacency for the plant.

    Example:
        >>> network = PlantNetwork()
        >>> reactor = network.add_node("reactor", NodeKind.REACTOR, reactor_physics)
        >>> hub = network.add_node("connector_1", NodeKind.CONNECTOR)
        >>> network.connect(reactor, hub)
    """

    def __init__(self):
        self._nodes: list[PlantNode] = []
        self._by_name: dict[str, int] = {}
        self._frozen = False

    # ----------------------------------------------------------------
    # Construction
    # ----------------------------------------------------------------

    def add_node(
        self,
        name: str,
        kind: NodeKind,
        device: Any = None,
        medium: Medium | None = None,
        input_slots: int = 0,
    ) -> int:
        """Append a node to the table.

        Args:
            name: Unique component name
            kind: Node kind tag
            device: Physics object for the node
            medium: Medium of the outgoing flow (defaults by kind)
            input_slots: Empty input slots to reserve (connectors only)

        Returns:
            Index of the new node

        Raises:
            TopologyError: If the table is frozen or the name is taken
        """
        self._check_not_frozen()
        if not name:
            raise TopologyError("node name cannot be empty")
        if name in self._by_name:
            raise TopologyError(f"Duplicate node name '{name}'")
        if input_slots and kind is not NodeKind.CONNECTOR:
            raise TopologyError(f"Only connectors have input slots ('{name}')")

        index = len(self._nodes)
        node = PlantNode(
            index=index,
            name=name,
            kind=kind,
            device=device,
            flow_out=Flow(medium=medium or DEFAULT_MEDIUM[kind]),
            inputs=[None] * input_slots,
        )
        self._nodes.append(node)
        self._by_name[name] = index
        return index

    def connect(self, source: int, target: int) -> None:
        """Wire a directed edge source -> target.

        Raises:
            TopologyError: If the table is frozen, an index is unknown, or a
                non-connector port is already linked
        """
        self._check_not_frozen()
        src = self.node(source)
        dst = self.node(target)
        if source == target:
            raise TopologyError(f"Cannot connect '{src.name}' to itself")

        if src.is_connector:
            if target in src.outputs:
                raise TopologyError(f"'{src.name}' already feeds '{dst.name}'")
            src.outputs[target] = False
        else:
            if src.downstream is not None:
                raise TopologyError(f"Downstream of '{src.name}' is already linked")
            src.downstream = target

        if dst.is_connector:
            if None in dst.inputs:
                dst.inputs[dst.inputs.index(None)] = source
            else:
                dst.inputs.append(source)
        else:
            if dst.upstream is not None:
                raise TopologyError(f"Upstream of '{dst.name}' is already linked")
            dst.upstream = source

    def freeze(self) -> "PlantNetwork":
        """Validate the topology and forbid further structural changes.

        Raises:
            TopologyError: If the plant lacks exactly one reactor and one
                condenser, or a non-connector node has no downstream link
        """
        for kind in PRESSURISED_KINDS:
            count = len(self.nodes_of_kind(kind))
            if count != 1:
                raise TopologyError(f"Plant needs exactly one {kind.value}, found {count}")

        for node in self._nodes:
            if not node.is_connector and node.downstream is None:
                raise TopologyError(f"'{node.name}' has no downstream link")

        self._frozen = True
        logger.debug(f"Plant network frozen with {len(self._nodes)} nodes")
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise TopologyError("Plant topology is fixed once frozen")

    # ----------------------------------------------------------------
    # Lookup
    # ----------------------------------------------------------------

    def node(self, index: int) -> PlantNode:
        if not 0 <= index < len(self._nodes):
            raise TopologyError(f"No node with index {index}")
        return self._nodes[index]

    def node_by_name(self, name: str) -> PlantNode:
        try:
            return self._nodes[self._by_name[name]]
        except KeyError:
            raise TopologyError(f"No node named '{name}'") from None

    def nodes_of_kind(self, kind: NodeKind) -> list[PlantNode]:
        return [node for node in self._nodes if node.kind is kind]

    @property
    def reactor(self) -> PlantNode:
        return self.nodes_of_kind(NodeKind.REACTOR)[0]

    @property
    def condenser(self) -> PlantNode:
        return self.nodes_of_kind(NodeKind.CONDENSER)[0]

    @property
    def connectors(self) -> list[PlantNode]:
        return self.nodes_of_kind(NodeKind.CONNECTOR)

    @property
    def valves(self) -> list[PlantNode]:
        return self.nodes_of_kind(NodeKind.VALVE)

    @property
    def pumps(self) -> list[PlantNode]:
        return self.nodes_of_kind(NodeKind.PUMP)

    @property
    def turbines(self) -> list[PlantNode]:
        return self.nodes_of_kind(NodeKind.TURBINE)

    def __iter__(self) -> Iterator[PlantNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # ----------------------------------------------------------------
    # Connector blocking
    # ----------------------------------------------------------------

    def set_output_blocked(self, connector: int, downstream: int) -> None:
        """Mark the edge connector -> downstream as blocked.

        Raises:
            TopologyError: If connector is not a connector or downstream is
                not one of its registered outputs
        """
        node = self.node(connector)
        if not node.is_connector:
            raise TopologyError(f"'{node.name}' is not a connector")
        if downstream not in node.outputs:
            raise TopologyError(
                f"Node {downstream} is not an output of connector '{node.name}'"
            )
        node.outputs[downstream] = True

    def unblock_all_outputs(self) -> None:
        for node in self.connectors:
            for downstream in node.outputs:
                node.outputs[downstream] = False

    def unblocked_outputs(self, connector: int) -> list[int]:
        node = self.node(connector)
        return [out for out, blocked in node.outputs.items() if not blocked]

    def is_connector_blocking(self, connector: int) -> bool:
        """True when every output of the connector is blocked."""
        return all(self.node(connector).outputs.values())

    def edge_blocked(self, source: int, target: int) -> bool:
        node = self.node(source)
        return node.is_connector and node.outputs.get(target, False)

    # ----------------------------------------------------------------
    # Traversal
    # ----------------------------------------------------------------

    def successors(self, index: int) -> list[int]:
        """Downstream nodes reachable over unblocked edges."""
        node = self.node(index)
        if node.is_connector:
            return self.unblocked_outputs(index)
        return [] if node.downstream is None else [node.downstream]

    def predecessors(self, index: int) -> list[int]:
        """Upstream nodes whose edge into index is unblocked."""
        node = self.node(index)
        if node.is_connector:
            candidates = [i for i in node.inputs if i is not None]
        else:
            candidates = [] if node.upstream is None else [node.upstream]
        return [i for i in candidates if not self.edge_blocked(i, index)]

    def failed_nodes(self) -> list[PlantNode]:
        """Nodes whose device is currently not operational."""
        return [
            node
            for node in self._nodes
            if node.device is not None and getattr(node.device, "operational", True) is False
        ]
