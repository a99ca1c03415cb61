"""
Sampler Loops
=============

Read-only loops that forward vessel state to the display.

- Throttle setting gauge: 250ms, setpoint rpm of 200
- Throttle actual gauge: 100ms, actual rpm of 200, critical from 140
- Rudder gauge: 16ms, rudder angle of 70
- Status line: 1000ms, speed band label plus velocity

None of these write to the vessel state. Clamping here is for
presentation only.
"""

import logging
from abc import abstractmethod
from dataclasses import dataclass

import numpy as np

from .base import PeriodicLoop, LoopConfig
from ..status import classify_velocity
from ..vessel_state import RPM_MIN, RPM_MAX, RUDDER_MIN, RUDDER_MAX
from ...display.sink import GaugeReading, GaugeLevel

logger = logging.getLogger(__name__)

# Actual rpm at or above this is drawn as critical
RPM_CRITICAL_THRESHOLD = 140.0


def gauge_value(value: float, low: float, high: float) -> int:
    """Clamp to [low, high] and truncate to an integer gauge value."""
    return int(np.clip(value, low, high))


class SamplerLoop(PeriodicLoop):
    """A periodic loop that only reads state and forwards a reading."""

    def _step(self):
        self.sample()

    @abstractmethod
    def sample(self):
        """Read state once and forward it to the display."""
        pass


@dataclass
class ThrottleSettingConfig(LoopConfig):
    name: str = "rpm_setting"
    update_rate_hz: float = 4.0


class ThrottleSettingSampler(SamplerLoop):
    """Gauge of the turbine rpm setpoint."""

    def __init__(self, state, display, cancel, config=None, on_fatal=None):
        super().__init__(config or ThrottleSettingConfig(), state, display, cancel, on_fatal)

    def sample(self):
        value = gauge_value(self.state.turbine_rpm_setting, RPM_MIN, RPM_MAX)
        self.display.show_gauge(GaugeReading("rpm_setting", value, int(RPM_MAX)))


@dataclass
class ThrottleActualConfig(LoopConfig):
    name: str = "rpm_actual"
    update_rate_hz: float = 10.0


class ThrottleActualSampler(SamplerLoop):
    """Gauge of the actual turbine rpm, flagged critical at high rpm."""

    def __init__(self, state, display, cancel, config=None, on_fatal=None):
        super().__init__(config or ThrottleActualConfig(), state, display, cancel, on_fatal)

    def sample(self):
        rpm = float(np.clip(self.state.turbine_rpm_actual, RPM_MIN, RPM_MAX))
        level = GaugeLevel.NOMINAL if rpm < RPM_CRITICAL_THRESHOLD else GaugeLevel.CRITICAL
        self.display.show_gauge(GaugeReading("rpm_actual", int(rpm), int(RPM_MAX), level))


@dataclass
class RudderConfig(LoopConfig):
    name: str = "rudder"
    update_rate_hz: float = 1.0 / 0.016


class RudderSampler(SamplerLoop):
    """Gauge of the rudder angle."""

    def __init__(self, state, display, cancel, config=None, on_fatal=None):
        super().__init__(config or RudderConfig(), state, display, cancel, on_fatal)

    def sample(self):
        value = gauge_value(self.state.rudder_angle, RUDDER_MIN, RUDDER_MAX)
        self.display.show_gauge(GaugeReading("rudder", value, int(RUDDER_MAX)))


@dataclass
class StatusMessageConfig(LoopConfig):
    name: str = "status"
    update_rate_hz: float = 1.0


class StatusMessageSampler(SamplerLoop):
    """Status line describing the current speed."""

    def __init__(self, state, display, cancel, config=None, on_fatal=None):
        super().__init__(config or StatusMessageConfig(), state, display, cancel, on_fatal)

    def sample(self):
        velocity = self.state.velocity
        band = classify_velocity(velocity)
        self.display.show_status(band.value, velocity)
