"""
Simulation Loops
================

Fixed-rate loops over the shared vessel state. Each loop runs on its own
thread and stops on the shared cancellation event:

- Physics loop: 16ms, updates rpm, acceleration and velocity
- Throttle setting gauge: 250ms
- Throttle actual gauge: 100ms
- Rudder gauge: 16ms
- Status line: 1000ms

Usage:
    from helmsim.simulation.loops import SimulationOrchestrator

    orchestrator = SimulationOrchestrator(display)
    orchestrator.start()
    # ... dispatch control commands
    orchestrator.stop()
"""

from .base import PeriodicLoop, LoopConfig
from .physics_loop import PhysicsLoop, PhysicsLoopConfig
from .samplers import (
    SamplerLoop,
    ThrottleSettingSampler,
    ThrottleActualSampler,
    RudderSampler,
    StatusMessageSampler,
)
from .orchestrator import (
    SimulationOrchestrator,
    SimulationConfig,
    SimulationHalted,
    LifecycleState,
    load_config,
)

__all__ = [
    'PeriodicLoop',
    'LoopConfig',
    'PhysicsLoop',
    'PhysicsLoopConfig',
    'SamplerLoop',
    'ThrottleSettingSampler',
    'ThrottleActualSampler',
    'RudderSampler',
    'StatusMessageSampler',
    'SimulationOrchestrator',
    'SimulationConfig',
    'SimulationHalted',
    'LifecycleState',
    'load_config',
]
