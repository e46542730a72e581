"""Core simulation entities"""

from .entity import Entity
from .call import Call, UP, DOWN
from .call_registry import CallRegistry
from .elevator import Elevator
from .door import Door

__all__ = [
    'Entity',
    'Call',
    'UP',
    'DOWN',
    'CallRegistry',
    'Elevator',
    'Door',
]
