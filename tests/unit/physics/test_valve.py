# tests/unit/physics/test_valve.py
"""Tests for Valve."""

from plant.physics.base_physics_engine import FailablePhysicsEngine
from plant.physics.valve import Valve, ValveParameters


class TestValve:
    """Test valve position."""

    def test_default_open(self):
        """Test valves start open at the default throughput."""
        valve = Valve("steam_valve_1")

        assert valve.is_open
        assert valve.max_throughput == 300

    def test_default_closed_from_params(self):
        """Test the starting position comes from the parameters."""
        valve = Valve("steam_valve_1", ValveParameters(default_open=False, max_throughput=120))

        assert not valve.is_open
        assert valve.max_throughput == 120

    def test_open_close(self):
        """Test opening and closing."""
        valve = Valve("steam_valve_1")

        valve.close()
        assert not valve.is_open
        assert valve.get_state() is False

        valve.open()
        assert valve.is_open

    def test_set_open_coerces_to_bool(self):
        """Test truthy values open the valve."""
        valve = Valve("steam_valve_1")

        valve.set_open(0)
        assert valve.is_open is False

        valve.set_open(1)
        assert valve.is_open is True

    def test_valves_do_not_fail(self):
        """Test a valve has no failure mode.

        WHY: The failed view of the plant lists failable components only.
        """
        assert not isinstance(Valve("steam_valve_1"), FailablePhysicsEngine)

    def test_telemetry(self):
        """Test telemetry reports position and throughput."""
        valve = Valve("steam_valve_1")
        valve.close()

        assert valve.get_telemetry() == {"open": False, "max_throughput": 300}
