"""
Simulation Module
=================

Vessel state and the propulsion update law. The loops that run them live
in helmsim.simulation.loops.
"""

from .vessel_state import VesselState
from .propulsion import PropulsionModel, PropulsionConfig, lag_step, format_speed
from .status import SpeedBand, classify_velocity, format_status

__all__ = [
    'VesselState',
    'PropulsionModel', 'PropulsionConfig', 'lag_step', 'format_speed',
    'SpeedBand', 'classify_velocity', 'format_status',
]
