"""
Elevator Simulator - Core simulation engine

This package provides the simulated entities (calls, registry, elevators,
doors) and the infrastructure they run on.
"""

__version__ = "0.1.0"

from .core.call import Call, UP, DOWN
from .core.call_registry import CallRegistry
from .core.elevator import Elevator
from .core.door import Door
from .core.entity import Entity

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

__all__ = [
    'Call',
    'UP',
    'DOWN',
    'CallRegistry',
    'Elevator',
    'Door',
    'Entity',
    'MessageBroker',
    'RealtimeEnvironment',
]
