"""
Helm Actuators
==============

Discrete control operations on the vessel setpoints.

Each operation is one clamped increment:
- Throttle up/down: +/-10 rpm, within [0, 200]
- Rudder left/right: -/+2.5 degrees, within [0, 70]

Throttle operations also refresh the speed readout immediately, so a
button press gets visible feedback before the next physics tick.
"""

import threading
from dataclasses import dataclass
from typing import Optional
import logging

from ..simulation.propulsion import format_speed
from ..simulation.vessel_state import (
    VesselState, RPM_MIN, RPM_MAX, RUDDER_MIN, RUDDER_MAX
)
from ..display.sink import DisplaySink

logger = logging.getLogger(__name__)


@dataclass
class ActuatorConfig:
    """Step sizes and limits for the helm controls."""
    throttle_step: float = 10.0     # rpm per press
    rpm_min: float = RPM_MIN
    rpm_max: float = RPM_MAX

    rudder_step: float = 2.5        # degrees per press
    rudder_min: float = RUDDER_MIN
    rudder_max: float = RUDDER_MAX


def clamp(value: float, low: float, high: float) -> float:
    """Constrain value to [low, high]."""
    return max(low, min(value, high))


class HelmActuators:
    """
    Throttle and rudder controls.

    These are the only writers of turbine_rpm_setting and rudder_angle.
    The lock serialises concurrent presses against each other so none is
    lost. The physics loop never takes it.
    """

    def __init__(
        self,
        state: VesselState,
        config: Optional[ActuatorConfig] = None,
        display: Optional[DisplaySink] = None
    ):
        self.state = state
        self.config = config or ActuatorConfig()
        self.display = display
        self._lock = threading.Lock()

    def increase_throttle(self):
        """Raise the rpm setpoint by one step, saturating at the maximum."""
        with self._lock:
            self.state.turbine_rpm_setting = min(
                self.state.turbine_rpm_setting + self.config.throttle_step,
                self.config.rpm_max
            )
            setting = self.state.turbine_rpm_setting
        logger.debug(f"Throttle up: setting={setting:.0f}")
        self._refresh_speed()

    def decrease_throttle(self):
        """Lower the rpm setpoint by one step, saturating at the minimum."""
        with self._lock:
            self.state.turbine_rpm_setting = max(
                self.state.turbine_rpm_setting - self.config.throttle_step,
                self.config.rpm_min
            )
            setting = self.state.turbine_rpm_setting
        logger.debug(f"Throttle down: setting={setting:.0f}")
        self._refresh_speed()

    def rudder_left(self):
        """Move the rudder one step to port."""
        self._move_rudder(-self.config.rudder_step)

    def rudder_right(self):
        """Move the rudder one step to starboard."""
        self._move_rudder(self.config.rudder_step)

    def _move_rudder(self, delta: float):
        with self._lock:
            self.state.rudder_angle = clamp(
                self.state.rudder_angle + delta,
                self.config.rudder_min,
                self.config.rudder_max
            )
            angle = self.state.rudder_angle
        logger.debug(f"Rudder {'left' if delta < 0 else 'right'}: angle={angle:.1f}")

    def _refresh_speed(self):
        """Push the current speed to the display. Failures propagate."""
        if self.display is not None:
            self.display.show_speed(format_speed(self.state.velocity))
