# tests/unit/model/test_repair.py
"""Tests for Repair and RepairSchedule."""

from plant.model.repair import Repair, RepairSchedule
from plant.physics.pump_physics import PumpParameters, PumpPhysics


def _failed_pump(name: str = "pump_1", repair_time: int = 5) -> PumpPhysics:
    pump = PumpPhysics(name, PumpParameters(repair_time=repair_time))
    pump.fail()
    return pump


# ================================================================
# REPAIR TESTS
# ================================================================
class TestRepair:
    """Test a single countdown."""

    def test_tick_counts_down(self):
        """Test tick reports completion at zero."""
        repair = Repair(_failed_pump(), 2)

        assert not repair.tick()
        assert repair.tick()
        assert repair.steps_remaining == 0

    def test_tick_never_goes_negative(self):
        """Test a finished repair stays finished."""
        repair = Repair(_failed_pump(), 0)

        assert repair.tick()
        assert repair.steps_remaining == 0


# ================================================================
# SCHEDULE TESTS
# ================================================================
class TestRepairSchedule:
    """Test the schedule of repairs in progress."""

    def test_start_failed_component(self):
        """Test a repair starts at the component's repair time."""
        schedule = RepairSchedule()
        pump = _failed_pump(repair_time=3)

        assert schedule.start(pump)
        assert schedule.is_repairing("pump_1")
        assert schedule.steps_remaining("pump_1") == 3
        assert len(schedule) == 1

    def test_start_operational_component_refused(self):
        """Test working components are not repaired."""
        schedule = RepairSchedule()

        assert not schedule.start(PumpPhysics("pump_1"))
        assert len(schedule) == 0

    def test_start_twice_refused(self):
        """Test a repair in progress is not restarted."""
        schedule = RepairSchedule()
        pump = _failed_pump()
        schedule.start(pump)
        schedule.advance()

        assert not schedule.start(pump)
        assert schedule.steps_remaining("pump_1") == 4

    def test_advance_completes_repair(self):
        """Test the component returns to service when the countdown ends."""
        schedule = RepairSchedule()
        pump = _failed_pump(repair_time=2)
        schedule.start(pump)

        assert schedule.advance() == []
        assert not pump.operational

        assert schedule.advance() == [pump]
        assert pump.operational
        assert not schedule.is_repairing("pump_1")
        assert schedule.steps_remaining("pump_1") is None

    def test_independent_countdowns(self):
        """Test repairs of different lengths finish separately."""
        schedule = RepairSchedule()
        fast = _failed_pump("pump_1", repair_time=1)
        slow = _failed_pump("pump_2", repair_time=3)
        schedule.start(fast)
        schedule.start(slow)

        assert schedule.advance() == [fast]
        assert schedule.advance() == []
        assert schedule.advance() == [slow]
        assert len(schedule) == 0
