"""Strategy interfaces for group control"""

from .allocation_strategy import IAllocationStrategy

__all__ = ['IAllocationStrategy']
