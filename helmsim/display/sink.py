"""
Display Sink
============

Boundary between the simulation and whatever renders it.

The simulation pushes three kinds of element:
- Speed readout: preformatted text (segment display)
- Gauges: integer value against a maximum, with a severity level
- Status line: speed band label plus raw velocity

A sink signals a failed write by raising DisplayError. Loops treat any
write failure as fatal.
"""

import threading
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Any

from ..simulation.status import format_status

logger = logging.getLogger(__name__)


class DisplayError(Exception):
    """A display element could not be written."""


class GaugeLevel(Enum):
    """Presentation hint for a gauge."""
    NOMINAL = "nominal"
    CRITICAL = "critical"


@dataclass(frozen=True)
class GaugeReading:
    """One gauge update."""
    name: str
    value: int
    maximum: int
    level: GaugeLevel = GaugeLevel.NOMINAL


class DisplaySink(ABC):
    """Consumer of simulation display elements."""

    @abstractmethod
    def show_speed(self, text: str):
        """Update the speed readout."""

    @abstractmethod
    def show_gauge(self, reading: GaugeReading):
        """Update a gauge."""

    @abstractmethod
    def show_status(self, label: str, velocity: float):
        """Update the status line."""

    def close(self):
        """Release the rendering surface."""


class LoggingDisplay(DisplaySink):
    """
    Display sink that writes elements to a logger.

    Speed and gauge updates arrive at up to 60Hz, so they go to DEBUG.
    The once-a-second status line goes to INFO.
    """

    def __init__(self, name: str = "helmsim.display"):
        self._log = logging.getLogger(name)
        self._closed = False

    def show_speed(self, text: str):
        self._check_open()
        self._log.debug(f"speed {text} kt")

    def show_gauge(self, reading: GaugeReading):
        self._check_open()
        self._log.debug(
            f"{reading.name} {reading.value}/{reading.maximum} "
            f"[{reading.level.value}]"
        )

    def show_status(self, label: str, velocity: float):
        self._check_open()
        self._log.info(format_status(label, velocity))

    def close(self):
        self._closed = True

    def _check_open(self):
        if self._closed:
            raise DisplayError("display is closed")


class MockDisplay(DisplaySink):
    """Recording display sink for testing without a terminal."""

    def __init__(self, fail_after: Optional[int] = None):
        """
        Args:
            fail_after: Raise DisplayError on every write once this many
                writes have succeeded. None never fails.
        """
        self.fail_after = fail_after
        self.closed = False
        self._writes: List[Tuple[str, Any]] = []
        self._lock = threading.Lock()

    def show_speed(self, text: str):
        self._record('speed', text)

    def show_gauge(self, reading: GaugeReading):
        self._record('gauge', reading)

    def show_status(self, label: str, velocity: float):
        self._record('status', (label, velocity))

    def close(self):
        self.closed = True

    def _record(self, kind: str, payload: Any):
        with self._lock:
            if self.fail_after is not None and len(self._writes) >= self.fail_after:
                raise DisplayError(f"mock display failed writing {kind}")
            self._writes.append((kind, payload))

    @property
    def writes(self) -> List[Tuple[str, Any]]:
        """Copy of all recorded writes, oldest first."""
        with self._lock:
            return list(self._writes)

    @property
    def write_count(self) -> int:
        with self._lock:
            return len(self._writes)

    def speeds(self) -> List[str]:
        return [p for k, p in self.writes if k == 'speed']

    def gauges(self, name: Optional[str] = None) -> List[GaugeReading]:
        return [
            p for k, p in self.writes
            if k == 'gauge' and (name is None or p.name == name)
        ]

    def statuses(self) -> List[Tuple[str, float]]:
        return [p for k, p in self.writes if k == 'status']
