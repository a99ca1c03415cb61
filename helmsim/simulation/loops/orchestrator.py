"""
Simulation Orchestrator
=======================

Starts every loop against one cancellation event and stops them together.

Manages:
- The shared vessel state and helm controls
- Physics loop and sampler loops
- Lifecycle: IDLE -> RUNNING -> CANCELLING -> STOPPED
- Fatal loop and control errors, which cancel every loop and surface from stop()
"""

import json
import random
import threading
import logging
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple, Union

from .base import PeriodicLoop, LoopConfig
from .physics_loop import PhysicsLoop
from .samplers import (
    ThrottleSettingSampler,
    ThrottleActualSampler,
    RudderSampler,
    StatusMessageSampler,
)
from ..propulsion import PropulsionModel, PropulsionConfig, format_speed
from ..vessel_state import VesselState
from ...control.actuators import HelmActuators, ActuatorConfig
from ...control.triggers import ControlCommand, ControlTriggerSource, ShutdownTrigger
from ...display.sink import DisplaySink

logger = logging.getLogger(__name__)


class SimulationHalted(RuntimeError):
    """A loop or control operation failed and the simulation was shut down."""

    def __init__(self, source: str, cause: BaseException):
        super().__init__(f"{source} failed: {cause}")
        self.source = source
        self.cause = cause


class LifecycleState(Enum):
    """Orchestrator lifecycle."""
    IDLE = auto()
    RUNNING = auto()
    CANCELLING = auto()
    STOPPED = auto()


@dataclass
class SimulationConfig:
    """Configuration for the simulation."""
    # Loop intervals (ms)
    physics_interval_ms: float = 16.0
    rpm_setting_interval_ms: float = 250.0
    rpm_actual_interval_ms: float = 100.0
    rudder_interval_ms: float = 16.0
    status_interval_ms: float = 1000.0

    # Random seed for the propulsion model (None = unseeded)
    seed: Optional[int] = None

    # Component configs
    propulsion: PropulsionConfig = field(default_factory=PropulsionConfig)
    actuators: ActuatorConfig = field(default_factory=ActuatorConfig)

    def loop_config(self, name: str) -> LoopConfig:
        """Loop config for one named loop."""
        interval_ms = getattr(self, f"{name}_interval_ms")
        return LoopConfig.from_interval(name, interval_ms / 1000.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Build a config from a plain dict, e.g. parsed JSON.

        Nested 'propulsion' and 'actuators' dicts fill their sub-configs.
        Unknown keys raise ValueError.
        """
        data = dict(data)
        propulsion = _build(PropulsionConfig, data.pop('propulsion', {}))
        actuators = _build(ActuatorConfig, data.pop('actuators', {}))
        config = _build(cls, data)
        config.propulsion = propulsion
        config.actuators = actuators
        return config


def _build(cls, data: Dict[str, Any]):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**data)


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """Load a SimulationConfig from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    logger.info(f"Loaded simulation config from {path}")
    return SimulationConfig.from_dict(data)


class SimulationOrchestrator:
    """
    Launch and coordinate the simulation loops.

    All loops share one VesselState and one cancellation event. stop()
    waits for every loop to return before the state becomes STOPPED, and
    a stopped orchestrator cannot be restarted.
    """

    def __init__(
        self,
        display: DisplaySink,
        state: Optional[VesselState] = None,
        config: Optional[SimulationConfig] = None,
        rng: Optional[random.Random] = None
    ):
        self.config = config or SimulationConfig()
        self.display = display
        self.state = state or VesselState()

        self._cancel = threading.Event()
        self._lock = threading.Lock()
        self._lifecycle = LifecycleState.IDLE
        self._failure: Optional[Tuple[str, BaseException]] = None

        self.model = PropulsionModel(self.config.propulsion, rng=rng, seed=self.config.seed)
        self.actuators = HelmActuators(self.state, self.config.actuators, display)
        self.shutdown = ShutdownTrigger(self._cancel)
        self.controls = ControlTriggerSource(
            self.actuators, self.shutdown, on_fatal=self._on_control_fatal
        )
        self.loops: List[PeriodicLoop] = self._create_loops()

    @property
    def lifecycle(self) -> LifecycleState:
        # Quit or a fatal error cancels the loops before stop() is called
        if self._lifecycle == LifecycleState.RUNNING and self._cancel.is_set():
            return LifecycleState.CANCELLING
        return self._lifecycle

    @property
    def running(self) -> bool:
        return self._lifecycle == LifecycleState.RUNNING

    @property
    def error(self) -> Optional[BaseException]:
        """First fatal loop or control error, if any."""
        return self._failure[1] if self._failure else None

    def _create_loops(self) -> List[PeriodicLoop]:
        cfg = self.config
        args = (self.state, self.display, self._cancel)
        return [
            PhysicsLoop(*args, model=self.model,
                        config=cfg.loop_config('physics'), on_fatal=self._on_fatal),
            ThrottleSettingSampler(*args, config=cfg.loop_config('rpm_setting'),
                                   on_fatal=self._on_fatal),
            ThrottleActualSampler(*args, config=cfg.loop_config('rpm_actual'),
                                  on_fatal=self._on_fatal),
            RudderSampler(*args, config=cfg.loop_config('rudder'),
                          on_fatal=self._on_fatal),
            StatusMessageSampler(*args, config=cfg.loop_config('status'),
                                 on_fatal=self._on_fatal),
        ]

    def start(self):
        """
        Write the initial readout and start all loops.

        Raises:
            RuntimeError: If not IDLE
            DisplayError: If the initial readout cannot be written
        """
        with self._lock:
            if self._lifecycle != LifecycleState.IDLE:
                raise RuntimeError(
                    f"Cannot start simulation in state {self._lifecycle.name}"
                )
            self._lifecycle = LifecycleState.RUNNING

        logger.info("Starting simulation")
        try:
            self.display.show_speed(format_speed(self.state.velocity))
        except Exception:
            self._lifecycle = LifecycleState.STOPPED
            self.display.close()
            raise

        for loop in self.loops:
            loop.start()
        logger.info(f"Simulation running with {len(self.loops)} loops")

    def stop(self):
        """
        Cancel all loops, wait for them, and release the display.

        Raises:
            SimulationHalted: If a loop or control operation failed while running
        """
        with self._lock:
            if self._lifecycle != LifecycleState.RUNNING:
                return
            self._lifecycle = LifecycleState.CANCELLING

        logger.info("Stopping simulation")
        self.shutdown.fire("Stop requested")
        for loop in self.loops:
            loop.join()

        self.display.close()
        self._lifecycle = LifecycleState.STOPPED
        logger.info("Simulation stopped")

        if self._failure is not None:
            raise SimulationHalted(*self._failure)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until shutdown is requested or a loop fails.

        Returns:
            True if cancelled, False on timeout
        """
        return self._cancel.wait(timeout)

    def run(self, duration: Optional[float] = None):
        """
        Start, run until cancelled or for duration seconds, then stop.

        Raises:
            SimulationHalted: If a loop or control operation failed
        """
        self.start()
        try:
            self.wait(duration)
        finally:
            self.stop()

    def _on_fatal(self, loop: PeriodicLoop, error: BaseException):
        """Called from a loop thread when its step raised."""
        self._fail(f"{loop.name} loop", error)

    def _on_control_fatal(self, command: ControlCommand, error: BaseException):
        """Called from the caller's thread when a control operation raised."""
        self._fail(f"{command.name} control", error)

    def _fail(self, source: str, error: BaseException):
        """Record the first failure and cancel every loop."""
        with self._lock:
            if self._failure is None:
                self._failure = (source, error)
        logger.error(f"Fatal error in {source}, shutting down: {error}")
        self.shutdown.fire(f"{source} failed")
