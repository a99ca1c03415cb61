"""
Propulsion Model
================

Turbine and hull speed update law, applied once per physics tick.

Per tick, in order:
1. Lag actual rpm toward the setpoint (weaker as rpm rises)
2. Passive rpm decay
3. Multiplicative rpm jitter
4. Acceleration from actual rpm
5. Euler-integrate velocity
6. Random drag factor on velocity
"""

import random
from dataclasses import dataclass
from typing import Optional
import logging

from .vessel_state import VesselState

logger = logging.getLogger(__name__)


@dataclass
class PropulsionConfig:
    """Constants of the propulsion update law."""
    lag_gain: float = 5.0              # Divisor scale of the lag step
    rpm_decay: float = 0.998           # Per-tick rpm retention
    rpm_jitter_max: float = 0.004      # Upper bound of U(0, max) jitter
    accel_per_rpm: float = 10.0        # acceleration = rpm / accel_per_rpm
    velocity_divisor: float = 10.0     # velocity += acceleration / divisor
    drag_min: float = 0.99             # Drag factor drawn from U(min, max)
    drag_max: float = 0.993


def lag_step(actual: float, setting: float, gain: float = 5.0) -> float:
    """
    First-order lag of actual rpm toward the setpoint.

    The +1 keeps the divisor positive at zero rpm.
    """
    return actual + (setting - actual) / ((actual + 1.0) * gain)


def format_speed(velocity: float) -> str:
    """Speed readout: fixed width, one decimal."""
    return f"{velocity:06.1f}"


class PropulsionModel:
    """
    Applies the propulsion update law to a VesselState.

    The random source only needs a ``uniform(a, b)`` method, so tests can
    pass a deterministic stand-in for ``random.Random``.
    """

    def __init__(
        self,
        config: Optional[PropulsionConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None
    ):
        self.config = config or PropulsionConfig()
        self.rng = rng if rng is not None else random.Random(seed)

    def step(self, state: VesselState):
        """Advance rpm, acceleration and velocity by one tick."""
        cfg = self.config

        rpm = lag_step(state.turbine_rpm_actual, state.turbine_rpm_setting, cfg.lag_gain)
        rpm *= cfg.rpm_decay
        rpm += rpm * self.rng.uniform(0.0, cfg.rpm_jitter_max)
        state.turbine_rpm_actual = rpm

        acceleration = rpm / cfg.accel_per_rpm
        state.acceleration = acceleration

        velocity = state.velocity + acceleration / cfg.velocity_divisor
        velocity *= self.rng.uniform(cfg.drag_min, cfg.drag_max)
        state.velocity = velocity
