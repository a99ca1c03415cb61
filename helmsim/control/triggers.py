"""
Control Triggers
================

Maps external actions onto helm operations and shutdown.

Each command fires exactly one actuator call. QUIT fires the shutdown
trigger instead.

Key bindings:
    +  throttle up          l  rudder left
    -  throttle down        r  rudder right
    q  quit
"""

import threading
import time
from enum import Enum, auto
from typing import Optional, Callable, Dict
import logging

from .actuators import HelmActuators

logger = logging.getLogger(__name__)


class ControlCommand(Enum):
    """External control actions."""
    THROTTLE_UP = auto()
    THROTTLE_DOWN = auto()
    RUDDER_LEFT = auto()
    RUDDER_RIGHT = auto()
    QUIT = auto()


COMMAND_ALIASES: Dict[str, ControlCommand] = {
    '+': ControlCommand.THROTTLE_UP,
    'up': ControlCommand.THROTTLE_UP,
    '-': ControlCommand.THROTTLE_DOWN,
    'down': ControlCommand.THROTTLE_DOWN,
    'l': ControlCommand.RUDDER_LEFT,
    'left': ControlCommand.RUDDER_LEFT,
    'r': ControlCommand.RUDDER_RIGHT,
    'right': ControlCommand.RUDDER_RIGHT,
    'q': ControlCommand.QUIT,
    'quit': ControlCommand.QUIT,
}


def parse_command(text: str) -> Optional[ControlCommand]:
    """
    Parse a key or word into a command.

    Returns:
        The command, or None if the input is not bound
    """
    return COMMAND_ALIASES.get(text.strip().lower())


class ShutdownTrigger:
    """
    One-shot shutdown request.

    The first fire() sets the cancellation event. Later calls are no-ops.
    """

    def __init__(self, cancel: threading.Event):
        self._cancel = cancel
        self._lock = threading.Lock()
        self._fired = False
        self._fire_time = 0.0
        self._reason = ""

    def fire(self, reason: str = "Quit") -> bool:
        """
        Request shutdown.

        Returns:
            True if this call triggered the shutdown
        """
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            self._fire_time = time.time()
            self._reason = reason
        logger.info(f"Shutdown requested: {reason}")
        self._cancel.set()
        return True

    @property
    def is_fired(self) -> bool:
        return self._fired

    @property
    def trigger_info(self) -> dict:
        """Get shutdown request information."""
        return {
            "fired": self._fired,
            "time": self._fire_time,
            "reason": self._reason
        }


class ControlTriggerSource:
    """Dispatches control commands to the helm and shutdown trigger."""

    def __init__(
        self,
        actuators: HelmActuators,
        shutdown: ShutdownTrigger,
        on_fatal: Optional[Callable[[ControlCommand, BaseException], None]] = None
    ):
        """
        Args:
            actuators: Helm operations to drive
            shutdown: Trigger fired by QUIT
            on_fatal: Called when an operation raises, before the error
                propagates to the caller
        """
        self.actuators = actuators
        self.shutdown = shutdown
        self.on_fatal = on_fatal
        self._handlers: Dict[ControlCommand, Callable[[], None]] = {
            ControlCommand.THROTTLE_UP: actuators.increase_throttle,
            ControlCommand.THROTTLE_DOWN: actuators.decrease_throttle,
            ControlCommand.RUDDER_LEFT: actuators.rudder_left,
            ControlCommand.RUDDER_RIGHT: actuators.rudder_right,
            ControlCommand.QUIT: lambda: self.shutdown.fire("Quit key"),
        }
        self.dispatch_count = 0

    def dispatch(self, command: ControlCommand):
        """
        Run the operation bound to a command.

        Raises:
            DisplayError: If the operation's display refresh failed. The
                on_fatal hook has already been told.
        """
        try:
            self._handlers[command]()
        except Exception as e:
            logger.error(f"{command.name} failed: {e}")
            if self.on_fatal:
                self.on_fatal(command, e)
            raise
        self.dispatch_count += 1

    def dispatch_text(self, text: str) -> bool:
        """
        Parse and dispatch one line of input.

        Returns:
            True if the input was a known command
        """
        command = parse_command(text)
        if command is None:
            logger.warning(f"Unknown command: {text.strip()!r}")
            return False
        self.dispatch(command)
        return True
