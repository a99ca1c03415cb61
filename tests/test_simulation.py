"""
Tests for Simulation Module
===========================

Unit tests for the vessel state, propulsion update law and speed
classification.
"""

import random
import pytest
import numpy as np

from helmsim.simulation.vessel_state import VesselState, RUDDER_CENTER
from helmsim.simulation.propulsion import (
    PropulsionModel, PropulsionConfig, lag_step, format_speed
)
from helmsim.simulation.status import (
    SpeedBand, classify_velocity, format_status
)
from helmsim.control.actuators import HelmActuators


class TestVesselState:
    """Tests for the vessel state record."""

    def test_defaults(self):
        """State starts neutral: engine off, rudder centred."""
        state = VesselState()
        assert state.turbine_rpm_setting == 0.0
        assert state.turbine_rpm_actual == 0.0
        assert state.velocity == 0.0
        assert state.acceleration == 0.0
        assert state.rudder_angle == RUDDER_CENTER == 35.0
        assert state.buoyancy == 50.0
        assert np.array_equal(state.position, np.zeros(3))

    def test_positions_not_shared(self):
        """Each state gets its own position vector."""
        a = VesselState()
        b = VesselState()
        a.position[0] = 5.0
        assert b.position[0] == 0.0

    def test_snapshot(self):
        """Snapshot copies every field into plain values."""
        state = VesselState(velocity=12.5, rudder_angle=40.0)
        snap = state.snapshot()
        assert snap['velocity'] == 12.5
        assert snap['rudder_angle'] == 40.0
        assert snap['position'] == (0.0, 0.0, 0.0)
        assert set(snap) == {
            'position', 'turbine_rpm_setting', 'turbine_rpm_actual',
            'velocity', 'acceleration', 'rudder_angle', 'heading',
            'heading_acceleration', 'buoyancy', 'buoyancy_acceleration',
        }


class TestLagStep:
    """Tests for the first-order rpm lag."""

    @pytest.mark.parametrize("setting", [0.0, 10.0, 50.0, 120.0, 200.0])
    @pytest.mark.parametrize("actual", [0.0, 0.5, 30.0, 99.9, 180.0, 250.0])
    def test_moves_toward_setpoint(self, actual, setting):
        """One lag step moves strictly toward the setpoint without overshoot."""
        new = lag_step(actual, setting)
        if actual < setting:
            assert actual < new <= setting
        elif actual > setting:
            assert setting <= new < actual
        else:
            assert new == actual

    def test_zero_rpm_is_finite(self):
        """The +1 offset keeps the step finite at zero rpm."""
        assert lag_step(0.0, 200.0) == pytest.approx(40.0)

    def test_lag_weakens_with_rpm(self):
        """The same error closes more slowly at higher rpm."""
        low = lag_step(10.0, 60.0) - 10.0
        high = lag_step(150.0, 200.0) - 150.0
        assert low > high > 0


class TestPropulsionModel:
    """Tests for the per-tick propulsion update."""

    def test_single_tick_from_rest(self, zero_rng):
        """With zero jitter and minimum drag the tick is exact."""
        state = VesselState(turbine_rpm_setting=200.0)
        PropulsionModel(rng=zero_rng).step(state)

        rpm = 40.0 * 0.998
        assert state.turbine_rpm_actual == pytest.approx(rpm)
        assert state.acceleration == pytest.approx(rpm / 10.0)
        assert state.velocity == pytest.approx(rpm / 100.0 * 0.99)

    def test_step_order(self, midpoint_rng):
        """Lag, decay, jitter, then acceleration, velocity, drag."""
        state = VesselState(turbine_rpm_setting=100.0, turbine_rpm_actual=50.0, velocity=20.0)
        PropulsionModel(rng=midpoint_rng).step(state)

        rpm = 50.0 + 50.0 / (51.0 * 5.0)
        rpm *= 0.998
        rpm += rpm * 0.002
        velocity = (20.0 + rpm / 100.0) * 0.9915
        assert state.turbine_rpm_actual == pytest.approx(rpm)
        assert state.acceleration == pytest.approx(rpm / 10.0)
        assert state.velocity == pytest.approx(velocity)

    def test_random_draw_ranges(self, midpoint_rng):
        """Jitter comes from U(0, 0.004), drag from U(0.99, 0.993)."""
        PropulsionModel(rng=midpoint_rng).step(VesselState())
        assert midpoint_rng.calls == [(0.0, 0.004), (0.99, 0.993)]

    def test_does_not_touch_setpoints(self, midpoint_model):
        """Physics never writes the actuator-owned fields."""
        state = VesselState(turbine_rpm_setting=120.0, rudder_angle=20.0)
        for _ in range(50):
            midpoint_model.step(state)
        assert state.turbine_rpm_setting == 120.0
        assert state.rudder_angle == 20.0

    def test_idle_engine_stays_stopped(self, midpoint_model):
        """No setpoint, no motion."""
        state = VesselState()
        for _ in range(1000):
            midpoint_model.step(state)
        assert state.turbine_rpm_actual == 0.0
        assert state.velocity == 0.0

    def test_seeded_models_repeat(self):
        """Same seed gives the same trajectory."""
        a = VesselState(turbine_rpm_setting=150.0)
        b = VesselState(turbine_rpm_setting=150.0)
        model_a = PropulsionModel(seed=7)
        model_b = PropulsionModel(seed=7)
        for _ in range(200):
            model_a.step(a)
            model_b.step(b)
        assert a.velocity == b.velocity
        assert a.turbine_rpm_actual == b.turbine_rpm_actual

    def test_custom_config(self, zero_rng):
        """Config constants replace the defaults."""
        config = PropulsionConfig(rpm_decay=1.0, accel_per_rpm=20.0)
        state = VesselState(turbine_rpm_setting=200.0)
        PropulsionModel(config, rng=zero_rng).step(state)
        assert state.turbine_rpm_actual == pytest.approx(40.0)
        assert state.acceleration == pytest.approx(2.0)

    def test_format_speed(self):
        """Readout is six characters wide with one decimal."""
        assert format_speed(0.0) == "0000.0"
        assert format_speed(12.34) == "0012.3"
        assert format_speed(233.96) == "0234.0"


class TestFullAhead:
    """Spin-up from rest to full throttle."""

    def test_converges_with_midpoint_noise(self, midpoint_model):
        """Twenty throttle presses then enough ticks reach full speed."""
        state = VesselState()
        helm = HelmActuators(state)
        for _ in range(20):
            helm.increase_throttle()
        assert state.turbine_rpm_setting == 200.0

        for _ in range(20000):
            midpoint_model.step(state)

        assert state.turbine_rpm_actual == pytest.approx(200.0, abs=2.0)
        assert state.velocity >= 150.0
        assert classify_velocity(state.velocity) == SpeedBand.FULL_SPEED

        # Stays there
        for _ in range(1000):
            midpoint_model.step(state)
            assert state.velocity >= 150.0

    def test_converges_with_seeded_noise(self):
        """With real random draws rpm hovers near 200 and speed stays high."""
        state = VesselState(turbine_rpm_setting=200.0)
        model = PropulsionModel(rng=random.Random(42))
        for _ in range(18000):
            model.step(state)

        rpms = []
        for _ in range(2000):
            model.step(state)
            rpms.append(state.turbine_rpm_actual)
            assert state.velocity >= 150.0

        assert np.mean(rpms) == pytest.approx(200.0, abs=15.0)


class TestClassifyVelocity:
    """Tests for speed band classification."""

    @pytest.mark.parametrize("velocity,band", [
        (0.0, SpeedBand.STOPPED),
        (0.999, SpeedBand.STOPPED),
        (1.0, SpeedBand.NEARLY_STOPPED),
        (9.99, SpeedBand.NEARLY_STOPPED),
        (10.0, SpeedBand.LOW_SPEED),
        (49.9, SpeedBand.LOW_SPEED),
        (50.0, SpeedBand.FORWARD),
        (99.9, SpeedBand.FORWARD),
        (100.0, SpeedBand.HIGH_SPEED),
        (149.9, SpeedBand.HIGH_SPEED),
        (150.0, SpeedBand.FULL_SPEED),
        (1e6, SpeedBand.FULL_SPEED),
    ])
    def test_bands(self, velocity, band):
        """Boundaries belong to the faster band."""
        assert classify_velocity(velocity) == band

    def test_labels(self):
        """Band values are the displayed labels."""
        assert classify_velocity(10.0).value == "Moving forward at low speed"
        assert classify_velocity(5.0).value == "Nearly stopped"
        assert classify_velocity(200.0).value == "Full speed forward"

    def test_partition_is_monotonic(self):
        """Bands never go back down as speed increases."""
        order = list(SpeedBand)
        previous = 0
        for v in np.linspace(0.0, 200.0, 4001):
            index = order.index(classify_velocity(float(v)))
            assert index >= previous
            previous = index
        assert previous == len(order) - 1

    def test_format_status(self):
        """Status text carries four decimals."""
        assert format_status("Moving forward", 62.5) == "Moving forward. 62.5000"
