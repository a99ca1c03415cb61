"""
Control Modules
===============

Helm controls and the triggers that drive them.

Components:
    - HelmActuators: Throttle and rudder setpoint operations
    - ControlTriggerSource: Maps external commands to operations
    - ShutdownTrigger: One-shot shutdown request
"""

from .actuators import (
    HelmActuators,
    ActuatorConfig,
    clamp,
)

from .triggers import (
    ControlCommand,
    ControlTriggerSource,
    ShutdownTrigger,
    parse_command,
)

__all__ = [
    'HelmActuators',
    'ActuatorConfig',
    'clamp',
    'ControlCommand',
    'ControlTriggerSource',
    'ShutdownTrigger',
    'parse_command',
]
