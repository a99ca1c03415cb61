"""
Display Sinks
=============

Interfaces the simulation writes its readouts to.
"""

from .sink import (
    DisplaySink,
    DisplayError,
    GaugeLevel,
    GaugeReading,
    LoggingDisplay,
    MockDisplay,
)

__all__ = [
    'DisplaySink',
    'DisplayError',
    'GaugeLevel',
    'GaugeReading',
    'LoggingDisplay',
    'MockDisplay',
]
