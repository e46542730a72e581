"""
Allocation Strategy Interface

Defines how elevators are selected for hall calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from simulator.core.call import Call


class IAllocationStrategy(ABC):
    """
    Interface for elevator allocation strategies

    A strategy is consulted once per pending call per scheduler tick. It
    must be stateless between calls: everything it needs is in the
    statuses handed to it.
    """

    @abstractmethod
    def select_elevator(
        self,
        call: Call,
        elevator_statuses: Dict[int, Dict[str, Any]]
    ) -> Optional[int]:
        """
        Select an elevator for a hall call

        Args:
            call: The pending hall call
            elevator_statuses: Status of every elevator, in elevator id order
                {
                    1: {
                        'elevator_id': int,
                        'state': str,              # 'IDLE' or 'BUSY'
                        'current_floor': int,
                        'active_call': Call|None,  # primary call of the current trip
                        'stops': List[Call],       # merged stops not yet visited
                    },
                    ...
                }

        Returns:
            Id of the selected elevator, or None if no elevator can take
            the call right now (it stays pending)
        """

    @abstractmethod
    def get_strategy_name(self) -> str:
        """
        Get the name of this strategy

        Returns:
            str: Strategy name (for logging and debugging)
        """
