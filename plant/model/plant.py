# plant/model/plant.py
"""
Plant model and step loop.

Each step runs, in order:
1. Repair countdown (finished repairs are operational for this step)
2. Blockage resolution from valve state
3. Flow propagation and core <-> condenser transfer
4. Physics update of every node
5. Health check of the reactor and condenser
6. Score from generator output

A fatal failure is raised from step() after the step's physics has run.
The plant is then over: further advance() calls do nothing.
"""

from collections.abc import Callable
from typing import Any

from plant.errors import CriticalComponentFailure, PlantError, TopologyError
from plant.flow.blockage import BlockageResolver
from plant.flow.flow import Flow
from plant.flow.network import NodeKind, PlantNetwork, PlantNode
from plant.flow.propagator import FlowParameters, FlowPropagator
from plant.model.repair import RepairSchedule
from plant.monitoring.logging_system import EventCategory, EventSeverity, get_logger
from plant.physics.base_physics_engine import BasePhysicsEngine, FailablePhysicsEngine
from plant.physics.condenser_physics import CondenserPhysics
from plant.physics.pump_physics import PumpPhysics
from plant.physics.reactor_physics import ReactorPhysics
from plant.physics.turbine_physics import GeneratorPhysics, TurbinePhysics
from plant.physics.valve import Valve

SCORE_PER_POWER_UNIT = 10


class Plant:
    """
    A complete plant: node table, physics engines, step loop and controls.

    Example:
        >>> plant = build_default_plant()
        >>> plant.set_control_rods(50)
        >>> plant.set_pump_rpm("pump_1", 400)
        >>> plant.advance(10)
        10
    """

    def __init__(
        self,
        network: PlantNetwork,
        generator: GeneratorPhysics | None = None,
        flow_params: FlowParameters | None = None,
        score_per_power_unit: int = SCORE_PER_POWER_UNIT,
    ):
        """Initialise plant.

        Args:
            network: Plant node table (frozen here if not yet frozen)
            generator: Generator on one of the turbines, if any
            flow_params: Flow limits for the propagator
            score_per_power_unit: Score added per unit of generator power per step
        """
        if not network.frozen:
            network.freeze()

        self.network = network
        self.generator = generator
        self.score_per_power_unit = score_per_power_unit

        self.blockage = BlockageResolver(network)
        self.propagator = FlowPropagator(network, flow_params)
        self.repairs = RepairSchedule()

        self.step_count = 0
        self.score = 0
        self.game_over = False
        self.failure: CriticalComponentFailure | None = None

        self._components: dict[str, BasePhysicsEngine] = {
            node.name: node.device for node in network if node.device is not None
        }
        coolant = self.condenser.coolant_pump
        self._components.setdefault(coolant.name, coolant)

        self.logger = get_logger(__name__, component="plant")
        self.logger.bind_step_source(self._current_step)
        for device in self._components.values():
            device.logger.bind_step_source(self._current_step)

        self._updaters: dict[NodeKind, Callable[[PlantNode], None]] = {
            NodeKind.REACTOR: self._update_reactor,
            NodeKind.CONDENSER: self._update_condenser,
            NodeKind.TURBINE: self._update_turbine,
        }

        self.logger.info(f"Plant created with {len(network)} nodes")

    def _current_step(self) -> int:
        return self.step_count

    # ----------------------------------------------------------------
    # Component access
    # ----------------------------------------------------------------

    @property
    def reactor(self) -> ReactorPhysics:
        return self.network.reactor.device

    @property
    def condenser(self) -> CondenserPhysics:
        return self.network.condenser.device

    @property
    def coolant_pump(self) -> PumpPhysics:
        return self.condenser.coolant_pump

    @property
    def pumps(self) -> list[PumpPhysics]:
        return [node.device for node in self.network.pumps]

    @property
    def valves(self) -> list[Valve]:
        return [node.device for node in self.network.valves]

    @property
    def turbines(self) -> list[TurbinePhysics]:
        return [node.device for node in self.network.turbines]

    def component(self, name: str) -> BasePhysicsEngine:
        """Look up a component by name.

        Raises:
            TopologyError: If no component has that name
        """
        try:
            return self._components[name]
        except KeyError:
            raise TopologyError(f"No component named '{name}'") from None

    def _typed(self, name: str, kind: type, label: str):
        device = self.component(name)
        if not isinstance(device, kind):
            raise TopologyError(f"'{name}' is not a {label}")
        return device

    # ----------------------------------------------------------------
    # Stepping
    # ----------------------------------------------------------------

    def step(self) -> None:
        """Run one full plant step.

        Raises:
            PlantError: If the plant has already failed
            CriticalComponentFailure: If the reactor or condenser failed
                during this step
        """
        if self.game_over:
            raise PlantError("Plant has failed; start a new plant")

        self.step_count += 1

        for component in self.repairs.advance():
            self.logger.log_event(
                EventSeverity.NOTICE,
                EventCategory.MAINTENANCE,
                f"{component.name} back in service",
                component=component.name,
            )

        self.blockage.resolve()
        self.propagator.propagate()
        self.propagator.transfer()

        for node in self.network:
            updater = self._updaters.get(node.kind)
            if updater is not None:
                updater(node)

        self._check_health()

        if self.generator is not None:
            self.score += self.generator.power_output * self.score_per_power_unit

    def advance(self, steps: int = 1) -> int:
        """Run steps back to back.

        Args:
            steps: Number of steps to run

        Returns:
            Number of steps completed (0 once the plant has failed)

        Raises:
            ValueError: If steps is negative
            CriticalComponentFailure: From the step that failed; no further
                steps run
        """
        if steps < 0:
            raise ValueError(f"steps cannot be negative, got {steps}")
        if self.game_over:
            return 0

        completed = 0
        for _ in range(steps):
            self.step()
            completed += 1
        return completed

    def _inflow(self, node: PlantNode) -> Flow:
        if node.upstream is None:
            return Flow(medium=node.flow_out.medium)
        return self.network.node(node.upstream).flow_out

    def _update_reactor(self, node: PlantNode) -> None:
        node.device.update(self._inflow(node))

    def _update_condenser(self, node: PlantNode) -> None:
        node.device.update()

    def _update_turbine(self, node: PlantNode) -> None:
        node.device.update(self._inflow(node))

    def _check_health(self) -> None:
        for device in (self.reactor, self.condenser):
            try:
                device.check_health()
            except CriticalComponentFailure as failure:
                self.game_over = True
                self.failure = failure
                self.logger.log_event(
                    EventSeverity.CRITICAL,
                    EventCategory.SAFETY,
                    f"Plant failure: {failure}",
                    component=failure.component,
                    data={"score": self.score},
                )
                raise

    # ----------------------------------------------------------------
    # Setpoints
    # ----------------------------------------------------------------

    def set_control_rods(self, percent: int) -> None:
        self.reactor.set_control_rods(percent)
        self._log_operator(f"Control rods set to {percent}%", self.reactor.name)

    def set_pump_rpm(self, name: str, rpm: int) -> None:
        pump: PumpPhysics = self._typed(name, PumpPhysics, "pump")
        pump.set_rpm(rpm)
        self._log_operator(f"{name} rpm set to {rpm}", name)

    def set_pump_on(self, name: str, on: bool) -> None:
        pump: PumpPhysics = self._typed(name, PumpPhysics, "pump")
        pump.set_on(on)
        self._log_operator(f"{name} switched {'on' if on else 'off'}", name)

    def set_valve(self, name: str, is_open: bool) -> None:
        valve: Valve = self._typed(name, Valve, "valve")
        valve.set_open(is_open)
        self._log_operator(f"{name} {'opened' if is_open else 'closed'}", name)

    def quench_reactor(self) -> bool:
        """Use the one-shot quench. Returns False if it was already used."""
        return self.reactor.quench()

    def _log_operator(self, message: str, component: str) -> None:
        self.logger.log_event(
            EventSeverity.INFO,
            EventCategory.OPERATOR,
            message,
            component=component,
        )

    # ----------------------------------------------------------------
    # Failure and repair
    # ----------------------------------------------------------------

    def fail_component(self, name: str) -> bool:
        """Take a failable component out of service.

        Returns:
            False if it was already failed
        """
        device: FailablePhysicsEngine = self._typed(name, FailablePhysicsEngine, "failable component")
        if not device.operational:
            return False
        device.fail()
        return True

    def repair_component(self, name: str) -> bool:
        """Start repairing a failed component.

        Returns:
            False if the component is not failed or is already being repaired
        """
        device: FailablePhysicsEngine = self._typed(name, FailablePhysicsEngine, "failable component")
        started = self.repairs.start(device)
        if started:
            self.logger.log_event(
                EventSeverity.NOTICE,
                EventCategory.MAINTENANCE,
                f"Repair of {name} started ({device.repair_time} steps)",
                component=name,
            )
        return started

    def failed_components(self) -> list[str]:
        """Names of components currently out of service."""
        names = [node.name for node in self.network.failed_nodes()]
        if not self.coolant_pump.operational and self.coolant_pump.name not in names:
            names.append(self.coolant_pump.name)
        return names

    # ----------------------------------------------------------------
    # Telemetry
    # ----------------------------------------------------------------

    def get_telemetry(self) -> dict[str, Any]:
        """Get plant-wide telemetry for monitoring."""
        components = {name: device.get_telemetry() for name, device in self._components.items()}
        for node in self.network:
            if node.name in components:
                components[node.name]["flow_out"] = node.flow_out.as_dict()

        telemetry = {
            "step": self.step_count,
            "score": self.score,
            "game_over": self.game_over,
            "failure": None if self.failure is None else self.failure.component,
            "components": components,
            "failed_components": self.failed_components(),
        }
        if self.generator is not None:
            telemetry["generator"] = self.generator.get_telemetry()
        return telemetry
