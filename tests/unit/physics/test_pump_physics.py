# tests/unit/physics/test_pump_physics.py
"""Tests for PumpPhysics.

Test Coverage:
- Setpoint validation
- Power switch and effective rpm
- Flow rate linear in rpm
- Failure and repair
"""

import pytest

from plant.physics.pump_physics import PumpParameters, PumpPhysics


# ================================================================
# SETPOINT TESTS
# ================================================================
class TestPumpSetpoint:
    """Test rpm setpoint handling."""

    def test_defaults(self):
        """Test a new pump is on and at rest."""
        pump = PumpPhysics("pump_1")

        assert pump.is_on
        assert pump.rpm == 0
        assert pump.max_rpm == 1000
        assert pump.repair_time == 5

    @pytest.mark.parametrize("rpm", [-1, 1001])
    def test_out_of_range_rpm_raises(self, rpm):
        """Test rpm outside [0, max_rpm] is rejected."""
        pump = PumpPhysics("pump_1")

        with pytest.raises(ValueError, match="Pump rpm must be in the range"):
            pump.set_rpm(rpm)

    def test_invalid_default_rpm_raises(self):
        """Test the default setpoint is validated."""
        with pytest.raises(ValueError, match="default_rpm"):
            PumpPhysics("pump_1", PumpParameters(default_rpm=2000))

    def test_nonzero_rpm_switches_pump_on(self):
        """Test setting a speed on a stopped pump starts it."""
        pump = PumpPhysics("pump_1")
        pump.set_on(False)

        pump.set_rpm(300)

        assert pump.is_on
        assert pump.rpm == 300

    def test_zero_rpm_leaves_switch_alone(self):
        """Test a zero setpoint does not switch an off pump on."""
        pump = PumpPhysics("pump_1")
        pump.set_on(False)

        pump.set_rpm(0)

        assert not pump.is_on


# ================================================================
# EFFECTIVE RPM TESTS
# ================================================================
class TestPumpEffectiveRpm:
    """Test the effective rpm seen by the plant."""

    def test_off_pump_reports_zero_but_keeps_setpoint(self):
        """Test switching off keeps the setpoint for later."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(600)

        pump.set_on(False)

        assert pump.rpm == 0
        assert pump.state.rpm_setpoint == 600

        pump.set_on(True)
        assert pump.rpm == 600

    def test_failed_pump_reports_zero(self):
        """Test a failed pump does not turn."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(600)

        pump.fail()

        assert not pump.operational
        assert pump.rpm == 0
        assert pump.flow_rate(400) == 0

    def test_repair_restores_setpoint(self):
        """Test a repaired pump resumes its previous speed."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(600)
        pump.fail()

        pump.repair()

        assert pump.operational
        assert pump.rpm == 600


# ================================================================
# FLOW TESTS
# ================================================================
class TestPumpFlow:
    """Test flow rate calculation."""

    @pytest.mark.parametrize(
        "rpm,expected",
        [(0, 0), (500, 200), (1000, 400), (333, 133)],
    )
    def test_flow_linear_in_rpm(self, rpm, expected):
        """Test flow at the default pump maximum of 400."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(rpm)

        assert pump.flow_rate(400) == expected

    def test_flow_rounds_half_up(self):
        """Test exact halves round up."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(500)

        assert pump.flow_rate(5) == 3


# ================================================================
# TELEMETRY TESTS
# ================================================================
class TestPumpTelemetry:
    """Test telemetry."""

    def test_telemetry(self):
        """Test telemetry reports effective and requested speed."""
        pump = PumpPhysics("pump_1")
        pump.set_rpm(250)
        pump.set_on(False)

        assert pump.get_telemetry() == {
            "rpm": 0,
            "rpm_setpoint": 250,
            "on": False,
            "operational": True,
        }
