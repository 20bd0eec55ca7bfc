"""
Blockage resolver.

Closed valves block the connector edge that leads toward them. A connector
whose outputs are all blocked in turn blocks every edge feeding it, until a
full pass over the connectors finds nothing new to block. The result depends
only on valve open/closed state.
"""

import logging

from plant.flow.network import NodeKind, PlantNetwork

logger = logging.getLogger(__name__)


class BlockageResolver:
    """Recompute connector output-blocked flags from valve state.

    Example:
        >>> resolver = BlockageResolver(network)
        >>> resolver.resolve()
        >>> resolver.blocked_edges()
        {(2, 3)}
    """

    def __init__(self, network: PlantNetwork):
        self.network = network

    def resolve(self) -> None:
        """Clear all blocked flags, then block from closed valves and
        propagate through fully blocked connectors."""
        self.network.unblock_all_outputs()

        for valve in self.network.valves:
            if not valve.device.is_open:
                self._block_upstream_of(valve.index)

        propagated: set[int] = set()
        changed = True
        while changed:
            changed = False
            for connector in self.network.connectors:
                if connector.index in propagated:
                    continue
                if self.network.is_connector_blocking(connector.index):
                    self._block_inputs_of(connector.index)
                    propagated.add(connector.index)
                    changed = True

        blocked = self.blocked_edges()
        if blocked:
            logger.debug(f"Blocked connector edges: {sorted(blocked)}")

    def blocked_edges(self) -> set[tuple[int, int]]:
        """Current (connector, downstream) pairs marked blocked."""
        return {
            (connector.index, downstream)
            for connector in self.network.connectors
            for downstream, blocked in connector.outputs.items()
            if blocked
        }

    # ----------------------------------------------------------------
    # Walks
    # ----------------------------------------------------------------

    def _block_upstream_of(self, start: int) -> None:
        """Follow single upstream links from start to the first connector or
        the reactor. A connector gets the edge toward start blocked."""
        previous = start
        current = self.network.node(start).upstream
        visited = {start}

        while current is not None and current not in visited:
            node = self.network.node(current)
            if node.is_connector:
                self.network.set_output_blocked(current, previous)
                return
            if node.kind is NodeKind.REACTOR:
                return
            visited.add(current)
            previous = current
            current = node.upstream

    def _block_inputs_of(self, connector: int) -> None:
        node = self.network.node(connector)
        for source in node.inputs:
            if source is None:
                continue
            if self.network.node(source).is_connector:
                self.network.set_output_blocked(source, connector)
            else:
                self._block_upstream_of(source)
