"""
Elevator Group Control System

This package provides the dispatch scheduler, its allocation strategy and
the command surface used to configure and drive a simulation.
"""

__version__ = "0.1.0"

from .group_control import GroupControlSystem
from .elevator_system import DispatchContext, ElevatorSystem, build_context

__all__ = ['GroupControlSystem', 'DispatchContext', 'ElevatorSystem', 'build_context']
