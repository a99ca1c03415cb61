"""
Vessel State
============

Mutable record of the vessel's physical quantities.

One instance is shared by every loop and by the actuator operations.
Writers are partitioned by field, so no lock guards the record:

- Actuators write: turbine_rpm_setting, rudder_angle
- Physics loop writes: turbine_rpm_actual, acceleration, velocity
- Samplers only read

Each field is a plain float rebound in a single assignment, so a reader
never sees a torn scalar. A reader taking several fields may see them
from different physics ticks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np


# Turbine setpoint range (rpm)
RPM_MIN = 0.0
RPM_MAX = 200.0

# Rudder range (degrees, 35 = centred)
RUDDER_MIN = 0.0
RUDDER_MAX = 70.0
RUDDER_CENTER = 35.0


@dataclass
class VesselState:
    """Physical state of the vessel."""
    # Position (x, y, z)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Propulsion
    turbine_rpm_setting: float = 0.0     # Setpoint, 0 to 200
    turbine_rpm_actual: float = 0.0      # Tracks setpoint with lag
    velocity: float = 0.0                # kt
    acceleration: float = 0.0            # Derived from actual rpm each tick

    # Steering
    rudder_angle: float = RUDDER_CENTER  # 0 to 70
    heading: float = 0.0                 # degrees
    heading_acceleration: float = 0.0

    # Depth
    buoyancy: float = 50.0               # 0 to 100
    buoyancy_acceleration: float = 0.0

    def snapshot(self) -> Dict[str, Any]:
        """
        Copy all fields into a plain dict.

        Fields are read one at a time, so the copy is not a consistent
        cut across a physics tick.
        """
        return {
            'position': tuple(float(c) for c in self.position),
            'turbine_rpm_setting': self.turbine_rpm_setting,
            'turbine_rpm_actual': self.turbine_rpm_actual,
            'velocity': self.velocity,
            'acceleration': self.acceleration,
            'rudder_angle': self.rudder_angle,
            'heading': self.heading,
            'heading_acceleration': self.heading_acceleration,
            'buoyancy': self.buoyancy,
            'buoyancy_acceleration': self.buoyancy_acceleration,
        }
