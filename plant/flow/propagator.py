"""
Flow propagator.

Recomputes every node's outgoing flow from current physical state, then moves
steam from the reactor to the condenser and water from the condenser back to
the reactor. Run BlockageResolver.resolve() first: every walk here honours
the connector blocked flags.

Order of a propagation:
1. Reset all flows to zero
2. Steam pass from the reactor
3. Pump totalling at the condenser
4. Water pass from the condenser
5. Connector fixpoint
"""

import logging
from dataclasses import dataclass

from plant.errors import FlowConvergenceError
from plant.flow.network import PlantNetwork, PlantNode

logger = logging.getLogger(__name__)


@dataclass
class FlowParameters:
    """Flow limits applied by the propagator.

    Attributes:
        max_core_steam_rate: Most steam the reactor can release per step
        max_pump_flow_rate: Water moved per step by one pump at max rpm
    """

    max_core_steam_rate: int = 500
    max_pump_flow_rate: int = 400


class FlowPropagator:
    """Steam and water flow computation over a frozen PlantNetwork.

    Example:
        >>> propagator = FlowPropagator(network)
        >>> propagator.propagate()
        >>> propagator.transfer()
    """

    def __init__(self, network: PlantNetwork, params: FlowParameters | None = None):
        self.network = network
        self.params = params or FlowParameters()

    def propagate(self) -> None:
        """Recompute every outgoing flow for the current plant state."""
        for node in self.network:
            node.flow_out.reset()

        self._steam_pass()
        self._total_pump_flow()
        self._water_pass()
        self._resolve_connectors()

    def transfer(self) -> None:
        """Move steam core -> sink and water sink -> core by the computed rates."""
        reactor = self.network.reactor
        condenser = self.network.condenser

        steam = reactor.flow_out.rate
        reactor.device.remove_steam(steam)
        condenser.device.add_steam(steam, reactor.flow_out.temperature)

        moved = min(condenser.device.state.water_volume, condenser.flow_out.rate)
        condenser.device.pump_out_water(moved)
        reactor.device.pump_in_water(moved)

        logger.debug(f"Transferred {steam} steam and {moved} water")

    # ----------------------------------------------------------------
    # Steam side
    # ----------------------------------------------------------------

    def _steam_pass(self) -> None:
        reactor = self.network.reactor
        condenser = self.network.condenser
        core_steam = reactor.device.state.steam_volume
        sink_steam = condenser.device.state.steam_volume

        rate = min(
            abs(core_steam - sink_steam),
            core_steam,
            self.params.max_core_steam_rate,
        )

        if not self.path_forwards(reactor.index, condenser.index):
            logger.debug("No open steam path from reactor to condenser")
            return

        reactor.flow_out.rate = min(rate, self.valve_capacity())
        reactor.flow_out.temperature = reactor.device.state.temperature
        self._propagate_chain(reactor.index)

    def valve_capacity(self) -> int:
        """Sum of max throughput over valves with an open path back to the reactor."""
        reactor = self.network.reactor.index
        return sum(
            valve.device.max_throughput
            for valve in self.network.valves
            if self.path_backwards(valve.index, reactor)
        )

    # ----------------------------------------------------------------
    # Water side
    # ----------------------------------------------------------------

    def _total_pump_flow(self) -> None:
        condenser = self.network.condenser
        total = 0
        for pump in self.network.pumps:
            if pump.device.operational and pump.upstream is not None:
                total += pump.device.flow_rate(self.params.max_pump_flow_rate)

        condenser.flow_out.rate = min(total, condenser.device.state.water_volume)

    def _water_pass(self) -> None:
        condenser = self.network.condenser
        condenser.flow_out.temperature = condenser.device.state.temperature
        self._propagate_chain(condenser.index)

    # ----------------------------------------------------------------
    # Connectors
    # ----------------------------------------------------------------

    def _resolve_connectors(self) -> None:
        connectors = self.network.connectors
        max_passes = 2 * len(connectors) + 2

        for _ in range(max_passes):
            changed = False
            for connector in connectors:
                previous = connector.flow_out.rate
                self._calc_connector_flow(connector)
                if connector.flow_out.rate != previous:
                    self._push_from_connector(connector.index)
                    changed = True
            if not changed:
                return

        raise FlowConvergenceError(
            f"Connector flows did not settle after {max_passes} passes"
        )

    def _calc_connector_flow(self, connector: PlantNode) -> None:
        # Summed input rate is divided across unblocked outputs, truncating.
        sources = [self.network.node(i).flow_out for i in connector.inputs if i is not None]
        open_outputs = len(self.network.unblocked_outputs(connector.index))

        total_rate = sum(flow.rate for flow in sources)
        total_temperature = sum(flow.temperature for flow in sources)

        connector.flow_out.rate = total_rate // open_outputs if open_outputs else 0
        connector.flow_out.temperature = total_temperature // len(sources) if sources else 0

    def _push_from_connector(self, start: int) -> None:
        stack = [start]
        seen = {start}
        while stack:
            current = stack.pop()
            for output in self.network.unblocked_outputs(current):
                if self.network.node(output).is_connector:
                    if output not in seen:
                        seen.add(output)
                        stack.append(output)
                else:
                    self._propagate_chain(output)

    # ----------------------------------------------------------------
    # Walks
    # ----------------------------------------------------------------

    def _propagate_chain(self, start: int) -> None:
        """Copy flow down a run of single-link nodes.

        A pressurised start is its own source; any other start copies from
        its upstream node. Stops at the first connector or pressurised node.
        """
        node = self.network.node(start)
        if node.pressurised:
            source, current = node, node.downstream
        elif node.upstream is None:
            return
        else:
            source, current = self.network.node(node.upstream), start

        visited = set()
        while current is not None and current not in visited:
            target = self.network.node(current)
            if target.is_connector or target.pressurised:
                return
            target.flow_out.copy_from(source.flow_out)
            visited.add(current)
            source, current = target, target.downstream

    def path_forwards(self, start: int, goal: int) -> bool:
        """True if goal is reachable from start over unblocked edges without
        passing through another pressurised node."""
        return self._search(start, goal, self.network.successors)

    def path_backwards(self, start: int, goal: int) -> bool:
        """True if goal reaches start over unblocked edges without passing
        through another pressurised node."""
        return self._search(start, goal, self.network.predecessors)

    def _search(self, start: int, goal: int, neighbours) -> bool:
        if start == goal:
            return True
        stack = [start]
        visited = {start}
        while stack:
            current = stack.pop()
            for candidate in neighbours(current):
                if candidate == goal:
                    return True
                if candidate in visited or self.network.node(candidate).pressurised:
                    continue
                visited.add(candidate)
                stack.append(candidate)
        return False
