"""
Physics Loop
============

Authoritative updater for turbine rpm, acceleration and velocity.

Runs the propulsion update law every 16ms (~60Hz) and pushes the new
speed to the segment readout.
"""

import threading
import logging
from dataclasses import dataclass
from typing import Optional, Callable

from .base import PeriodicLoop, LoopConfig
from ..propulsion import PropulsionModel, format_speed
from ..vessel_state import VesselState
from ...display.sink import DisplaySink

logger = logging.getLogger(__name__)


@dataclass
class PhysicsLoopConfig(LoopConfig):
    """Configuration for the physics loop."""
    name: str = "physics"
    update_rate_hz: float = 1.0 / 0.016


class PhysicsLoop(PeriodicLoop):
    """Advances the propulsion model and updates the speed readout."""

    def __init__(
        self,
        state: VesselState,
        display: DisplaySink,
        cancel: threading.Event,
        model: Optional[PropulsionModel] = None,
        config: Optional[LoopConfig] = None,
        on_fatal: Optional[Callable] = None
    ):
        super().__init__(config or PhysicsLoopConfig(), state, display, cancel, on_fatal)
        self.model = model or PropulsionModel()

    def _step(self):
        self.model.step(self.state)
        self.display.show_speed(format_speed(self.state.velocity))
