"""
Elevator System Analyzer

Records broker traffic during a run and reports dispatch performance:
waiting times, trajectory diagram, JSON Lines event log.
"""

__version__ = "0.1.0"

from .statistics import Statistics

__all__ = ['Statistics']
