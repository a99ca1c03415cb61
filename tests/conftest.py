"""
Shared test fixtures for helm simulator unit tests.
"""

import threading
import pytest

from helmsim.simulation.vessel_state import VesselState
from helmsim.simulation.propulsion import PropulsionModel
from helmsim.simulation.loops.orchestrator import SimulationConfig
from helmsim.control.actuators import HelmActuators
from helmsim.display.sink import MockDisplay, DisplayError


class FixedRandom:
    """
    Stand-in for random.Random that returns a fixed point of each range.

    fraction=0.5 gives the midpoint, 0.0 the lower bound.
    """

    def __init__(self, fraction: float = 0.5):
        self.fraction = fraction
        self.calls = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return a + (b - a) * self.fraction


@pytest.fixture
def vessel_state():
    """Fresh vessel state with defaults."""
    return VesselState()


@pytest.fixture
def mock_display():
    """Recording display that never fails."""
    return MockDisplay()


@pytest.fixture
def midpoint_rng():
    """Deterministic random source returning range midpoints."""
    return FixedRandom(0.5)


@pytest.fixture
def zero_rng():
    """Deterministic random source returning range lower bounds."""
    return FixedRandom(0.0)


@pytest.fixture
def midpoint_model(midpoint_rng):
    """Propulsion model with midpoint jitter and drag."""
    return PropulsionModel(rng=midpoint_rng)


@pytest.fixture
def actuators(vessel_state):
    """Helm actuators with no display attached."""
    return HelmActuators(vessel_state)


@pytest.fixture
def cancel_event():
    """Cancellation event, set on teardown so no loop thread outlives a test."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def fast_config():
    """Short loop intervals so threaded tests finish quickly."""
    return SimulationConfig(
        physics_interval_ms=5.0,
        rpm_setting_interval_ms=10.0,
        rpm_actual_interval_ms=10.0,
        rudder_interval_ms=5.0,
        status_interval_ms=20.0,
        seed=1234,
    )


class RefreshFailingDisplay(MockDisplay):
    """
    Display whose speed writes fail only from one named thread.

    Loop threads keep writing normally, so a failure can be pinned on a
    control operation rather than a loop.
    """

    def __init__(self, thread_name: str, skip: int = 0):
        super().__init__()
        self.thread_name = thread_name
        self.skip = skip

    def show_speed(self, text: str):
        if threading.current_thread().name == self.thread_name:
            if self.skip <= 0:
                raise DisplayError("speed refresh failed")
            self.skip -= 1
        super().show_speed(text)


@pytest.fixture
def refresh_failing_display():
    """Factory for displays that fail speed refreshes from one thread."""
    return RefreshFailingDisplay
