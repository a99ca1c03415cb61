"""
Base Periodic Loop
==================

Base class for the fixed-rate loops that drive and sample the vessel state.

Each loop runs on its own thread, paces itself against a monotonic clock,
and waits on a shared cancellation event so that cancellation is seen at
the next wait point. A step that raises is fatal to the loop.
"""

import threading
import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Callable

from ..vessel_state import VesselState
from ...display.sink import DisplaySink

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Base configuration for periodic loops."""
    name: str = "loop"
    update_rate_hz: float = 60.0

    @property
    def update_interval(self) -> float:
        """Time between updates in seconds."""
        return 1.0 / self.update_rate_hz

    @classmethod
    def from_interval(cls, name: str, interval_s: float) -> 'LoopConfig':
        """Build a config from a tick interval instead of a rate."""
        if interval_s <= 0:
            raise ValueError(f"{name}: interval must be positive, got {interval_s}")
        return cls(name=name, update_rate_hz=1.0 / interval_s)


class PeriodicLoop(ABC):
    """
    Base class for loops over the shared vessel state.

    Subclasses implement _step(). This class handles threading, pacing,
    cancellation and fatal error reporting.
    """

    def __init__(
        self,
        config: LoopConfig,
        state: VesselState,
        display: DisplaySink,
        cancel: threading.Event,
        on_fatal: Optional[Callable[['PeriodicLoop', BaseException], None]] = None
    ):
        """
        Initialize the loop.

        Args:
            config: Loop configuration
            state: Shared vessel state
            display: Sink for this loop's readout
            cancel: Shared cancellation event
            on_fatal: Called from the loop thread when a step raises
        """
        self.config = config
        self.state = state
        self.display = display
        self.cancel = cancel
        self.on_fatal = on_fatal

        self.error: Optional[BaseException] = None
        self.tick_count = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the loop thread."""
        if self._thread is not None:
            raise RuntimeError(f"{self.name} loop already started")

        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name=f"{self.__class__.__name__}-{self.name}"
        )
        self._thread.start()
        logger.info(
            f"{self.name} loop started at {self.config.update_rate_hz:.1f}Hz "
            f"({self.config.update_interval * 1000:.0f}ms)"
        )

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the loop thread to return.

        Returns:
            True if the thread has exited
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self):
        """Main loop - one step per interval until cancelled."""
        interval = self.config.update_interval
        next_update = time.monotonic() + interval

        while not self.cancel.is_set():
            # Sleep until next update, waking early on cancellation
            if self.cancel.wait(max(0.0, next_update - time.monotonic())):
                break

            try:
                self._step()
            except Exception as e:
                self.error = e
                logger.error(f"{self.name} loop step failed: {e}")
                if self.on_fatal:
                    self.on_fatal(self, e)
                return

            self.tick_count += 1
            next_update += interval

            # Resync rather than burst if we fell behind
            now = time.monotonic()
            if next_update < now:
                next_update = now + interval

        logger.info(f"{self.name} loop stopped after {self.tick_count} ticks")

    @abstractmethod
    def _step(self):
        """
        Execute one tick.

        Raising from here stops the loop and reports the error as fatal.
        """
        pass
