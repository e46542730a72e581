"""
Intermediate Stop Strategy

Greedy, stateless allocation: absorb the call into a trip already heading
past its floor, otherwise send the nearest idle car.
"""

import logging
from typing import Any, Dict, Optional

from simulator.core.call import Call, UP
from ..interfaces.allocation_strategy import IAllocationStrategy

logger = logging.getLogger(__name__)


class IntermediateStopStrategy(IAllocationStrategy):
    """
    Intermediate stop allocation strategy

    Selection Logic (single pass in elevator id order):
    - BUSY elevators: the call can be merged when the trip's primary call
      has the same direction and the call floor lies strictly between the
      car's current floor and the primary call floor. The first such
      elevator is returned immediately, even if another one is closer.
    - IDLE elevators: the one nearest to the call floor; ties go to the
      lowest id.
    - Neither: None, the call stays pending.
    """

    def select_elevator(
        self,
        call: Call,
        elevator_statuses: Dict[int, Dict[str, Any]]
    ) -> Optional[int]:
        best_elevator = None
        best_distance = None

        for elevator_id, status in elevator_statuses.items():
            if status['state'] == 'BUSY':
                if self.can_add_intermediate_stop(status, call):
                    logger.debug(f"[GCS] Elevator_{elevator_id}: merge floor {call.floor} ({call.direction}) into trip")
                    return elevator_id
                continue

            distance = abs(call.floor - status['current_floor'])
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_elevator = elevator_id

        if best_elevator is not None:
            logger.debug(f"[GCS] Selected idle Elevator_{best_elevator} with distance={best_distance}")
        return best_elevator

    @staticmethod
    def can_add_intermediate_stop(status: Dict[str, Any], call: Call) -> bool:
        """Check whether call lies ahead on the busy elevator's current trip"""
        active_call = status.get('active_call')
        if active_call is None or active_call.direction != call.direction:
            return False
        current_floor = status['current_floor']
        if call.direction == UP:
            return current_floor < call.floor < active_call.floor
        return current_floor > call.floor > active_call.floor

    def get_strategy_name(self) -> str:
        """Return strategy name"""
        return "Intermediate Stop (first merge, else nearest idle)"
