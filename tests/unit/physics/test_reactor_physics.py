# tests/unit/physics/test_reactor_physics.py
"""Tests for ReactorPhysics.

Test Coverage:
- Initialisation and parameter validation
- Heating from control rods, doubled in the low-water condition
- Cooldown from feedwater
- Evaporation above the boiling point
- Damage from limit violations and the one-shot failure signal
- Emergency quench
- Telemetry
"""

import pytest

from plant.errors import CriticalComponentFailure
from plant.flow.flow import Flow
from plant.monitoring.logging_system import EventCategory
from plant.physics.reactor_physics import (
    ReactorParameters,
    ReactorPhysics,
    ReactorState,
)


# ================================================================
# FIXTURES
# ================================================================
@pytest.fixture
def custom_params():
    """Factory for custom reactor parameters."""

    def _create(**kwargs):
        return ReactorParameters(**kwargs)

    return _create


def _cold_inflow() -> Flow:
    return Flow(rate=0, temperature=50)


# ================================================================
# INITIALISATION TESTS
# ================================================================
class TestReactorPhysicsInitialisation:
    """Test ReactorPhysics initialisation."""

    def test_initialisation_with_defaults(self):
        """Test creating ReactorPhysics with default parameters."""
        reactor = ReactorPhysics()

        assert reactor.name == "reactor"
        assert reactor.state.water_volume == 8000
        assert reactor.state.steam_volume == 0
        assert reactor.state.temperature == 50
        assert reactor.state.health == 100
        assert reactor.state.control_rods == 100
        assert reactor.quench_available

    def test_initialisation_with_custom_params(self, custom_params):
        """Test initial state follows the parameters."""
        params = custom_params(initial_water_volume=5000, initial_steam_volume=200)

        reactor = ReactorPhysics("core", params)

        assert reactor.state.water_volume == 5000
        assert reactor.state.steam_volume == 200
        assert reactor.state.pressure == 30

    def test_initialisation_empty_name_raises(self):
        """Test that empty name raises ValueError."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            ReactorPhysics("")

    def test_initial_rods_out_of_range_raises(self, custom_params):
        """Test rod position is validated at construction."""
        with pytest.raises(ValueError, match="initial_control_rods"):
            ReactorPhysics("reactor", custom_params(initial_control_rods=120))

    def test_get_state_returns_state(self):
        """Test get_state returns the live state object."""
        reactor = ReactorPhysics()

        assert isinstance(reactor.get_state(), ReactorState)
        assert reactor.get_state() is reactor.state


# ================================================================
# HEATING TESTS
# ================================================================
class TestReactorHeating:
    """Test control rod heating."""

    def test_rods_fully_in_no_heating(self):
        """Test fully lowered rods add no heat."""
        reactor = ReactorPhysics()

        reactor.update(_cold_inflow())

        assert reactor.state.temperature == 50

    def test_partial_rods_heating(self):
        """Test heating is linear in rod withdrawal."""
        reactor = ReactorPhysics()
        reactor.set_control_rods(40)

        reactor.update(_cold_inflow())

        assert reactor.state.temperature == 110

    def test_low_water_doubles_heating(self):
        """Test heating doubles at the minimum safe water volume.

        WHY: At exactly the minimum there is no low-water damage yet,
        but the heating penalty already applies.
        """
        reactor = ReactorPhysics()
        reactor.state.water_volume = 2000
        reactor.set_control_rods(0)

        reactor.update(_cold_inflow())

        assert reactor.state.temperature == 250
        assert reactor.state.health == 100


# ================================================================
# COOLDOWN TESTS
# ================================================================
class TestReactorCooldown:
    """Test feedwater cooldown."""

    def test_feedwater_cools_core(self):
        """Test cooldown scales with the fresh share of the core water."""
        reactor = ReactorPhysics()
        reactor.state.temperature = 250
        reactor.pump_in_water(2000)

        reactor.update(Flow(rate=2000, temperature=50))

        assert reactor.state.temperature == 210

    def test_no_feedwater_no_cooldown(self):
        """Test a core without feedwater keeps its heat."""
        reactor = ReactorPhysics()
        reactor.state.temperature = 250

        reactor.update(_cold_inflow())

        assert reactor.state.temperature == 250

    def test_pumped_in_resets_after_update(self):
        """Test the feedwater record only applies to one step."""
        reactor = ReactorPhysics()
        reactor.pump_in_water(500)

        assert reactor.state.water_pumped_in == 500
        reactor.update(_cold_inflow())
        assert reactor.state.water_pumped_in == 0

    def test_empty_core_skips_cooldown(self):
        """Test an empty core does not divide by zero."""
        reactor = ReactorPhysics()
        reactor.state.water_volume = 0
        reactor.state.temperature = 100

        reactor.update(_cold_inflow())

        assert reactor.state.temperature == 100


# ================================================================
# EVAPORATION TESTS
# ================================================================
class TestReactorEvaporation:
    """Test boiling."""

    def test_no_evaporation_at_boiling_point(self):
        """Test evaporation starts strictly above the boiling point."""
        reactor = ReactorPhysics()
        reactor.state.temperature = 285

        reactor.update(_cold_inflow())

        assert reactor.state.steam_volume == 0
        assert reactor.state.water_volume == 8000

    def test_evaporation_converts_one_to_two(self):
        """Test boiled water becomes twice as much steam."""
        reactor = ReactorPhysics()
        reactor.state.temperature = 400

        reactor.update(_cold_inflow())

        assert reactor.state.water_volume == 7920
        assert reactor.state.steam_volume == 160
        assert reactor.state.pressure == 24

    def test_evaporation_limited_by_water(self):
        """Test the core cannot boil more water than it holds."""
        reactor = ReactorPhysics()
        reactor.state.temperature = 400
        reactor.state.water_volume = 10

        reactor.update(_cold_inflow())

        assert reactor.state.water_volume == 0
        assert reactor.state.steam_volume == 20


# ================================================================
# DAMAGE TESTS
# ================================================================
class TestReactorDamage:
    """Test damage and failure."""

    def test_over_temperature_damage(self):
        """Test temperature above the limit costs health."""
        reactor = ReactorPhysics("reactor_overheat")
        reactor.state.temperature = 3000

        reactor.update(_cold_inflow())

        assert reactor.state.health == 90

    def test_each_violation_counts(self):
        """Test over-pressure and low water damage independently."""
        reactor = ReactorPhysics("reactor_violations")
        reactor.state.steam_volume = 20000
        reactor.state.water_volume = 1000

        reactor.update(_cold_inflow())

        assert reactor.state.pressure == 3000
        assert reactor.state.health == 80

    def test_damage_logged_as_alarm(self):
        """Test damage lands in the event trail."""
        reactor = ReactorPhysics("reactor_alarm")
        reactor.state.temperature = 3000

        reactor.update(_cold_inflow())

        alarms = reactor.logger.get_event_trail(category=EventCategory.ALARM)
        assert len(alarms) == 1
        assert alarms[0].data["health"] == 90

    def test_failure_signalled_once(self):
        """Test check_health raises only on the first failed check."""
        reactor = ReactorPhysics("reactor_failure")
        reactor.state.health = 5
        reactor.state.temperature = 3000
        reactor.update(_cold_inflow())

        with pytest.raises(CriticalComponentFailure) as exc_info:
            reactor.check_health()
        reactor.check_health()

        assert exc_info.value.component == "reactor_failure"
        assert exc_info.value.health == -5
        assert reactor.has_failed()

    def test_healthy_check_does_nothing(self):
        """Test check_health is silent above zero."""
        reactor = ReactorPhysics()

        reactor.check_health()

        assert not reactor.has_failed()


# ================================================================
# VOLUME TESTS
# ================================================================
class TestReactorVolumes:
    """Test water and steam transfer methods."""

    def test_negative_pump_in_raises(self):
        """Test negative volumes are rejected."""
        reactor = ReactorPhysics()

        with pytest.raises(ValueError, match="cannot be negative"):
            reactor.pump_in_water(-1)

    def test_remove_steam_clamps_at_zero(self):
        """Test removing more steam than held empties the core."""
        reactor = ReactorPhysics()
        reactor.state.steam_volume = 30

        reactor.remove_steam(50)

        assert reactor.state.steam_volume == 0

    def test_add_steam(self):
        """Test steam can be added directly."""
        reactor = ReactorPhysics()

        reactor.add_steam(40)

        assert reactor.state.steam_volume == 40


# ================================================================
# CONTROL TESTS
# ================================================================
class TestReactorControl:
    """Test operator control."""

    @pytest.mark.parametrize("percent", [-1, 101])
    def test_invalid_rod_position_raises(self, percent):
        """Test rods outside [0, 100] are rejected."""
        reactor = ReactorPhysics()

        with pytest.raises(ValueError, match="Control rod percentage"):
            reactor.set_control_rods(percent)
        assert reactor.state.control_rods == 100

    def test_quench_condenses_steam(self):
        """Test quench turns most of the steam back into water."""
        reactor = ReactorPhysics()
        reactor.state.steam_volume = 1000
        reactor.state.temperature = 900

        assert reactor.quench()

        assert reactor.state.steam_volume == 100
        assert reactor.state.water_volume == 8450
        assert reactor.state.temperature == 50
        assert reactor.state.pressure == 15
        assert not reactor.quench_available

    def test_quench_conserves_mass_on_odd_steam(self):
        """Test quench never creates water from half a unit of steam."""
        reactor = ReactorPhysics()
        reactor.state.steam_volume = 101
        before = 2 * reactor.state.water_volume + reactor.state.steam_volume

        reactor.quench()

        after = 2 * reactor.state.water_volume + reactor.state.steam_volume
        assert after == before

    def test_quench_is_one_shot(self):
        """Test the second quench is refused."""
        reactor = ReactorPhysics()
        reactor.state.steam_volume = 1000
        reactor.quench()
        reactor.state.steam_volume = 1000

        assert not reactor.quench()
        assert reactor.state.steam_volume == 1000


# ================================================================
# TELEMETRY TESTS
# ================================================================
class TestReactorTelemetry:
    """Test telemetry."""

    def test_telemetry_keys(self):
        """Test telemetry carries every reported quantity."""
        telemetry = ReactorPhysics().get_telemetry()

        assert set(telemetry) == {
            "temperature",
            "pressure",
            "water_volume",
            "steam_volume",
            "health",
            "control_rods",
            "quench_available",
            "failed",
        }
        assert telemetry["failed"] is False
