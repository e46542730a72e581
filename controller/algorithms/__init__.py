"""Allocation algorithms"""

from .intermediate_stop import IntermediateStopStrategy

__all__ = ['IntermediateStopStrategy']
