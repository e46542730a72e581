import logging
from typing import Dict, List, Optional

import simpy

from .call import Call
from ..infrastructure.message_broker import MessageBroker

logger = logging.getLogger(__name__)


class CallRegistry:
    """
    Hall call bookkeeping for the whole building

    Tracks calls waiting for an elevator (pending, arrival order), the
    primary call of every elevator's current trip (one slot per elevator),
    and every dispatched call whose floor has not been reached yet.
    """
    def __init__(self, env: simpy.Environment, num_elevators: int, broker: MessageBroker):
        """
        Args:
            env (simpy.Environment): SimPy environment
            num_elevators (int): Fleet size, one active slot per elevator
            broker (MessageBroker): Message broker used to light/clear hall buttons
        """
        self.env = env
        self.broker = broker
        self._pending: List[Call] = []
        self._active: List[Optional[Call]] = [None] * num_elevators
        self._outstanding: Dict[Call, int] = {}  # dispatched, not yet served -> elevator_id

    @property
    def pending(self) -> List[Call]:
        """Pending calls in arrival order (copy)"""
        return list(self._pending)

    @property
    def active_calls(self) -> List[Optional[Call]]:
        """Primary call per elevator slot (index = elevator_id - 1)"""
        return list(self._active)

    def is_registered(self, call: Call) -> bool:
        """Check whether an equal call is pending, a trip's primary call, or a queued stop"""
        return call in self._pending or call in self._active or call in self._outstanding

    def submit(self, call: Call) -> bool:
        """
        Register a pressed hall button

        Returns:
            True if the call was accepted, False if it is a duplicate (no-op)
        """
        if self.is_registered(call):
            logger.debug(f"{self.env.now:.2f} [CallRegistry] Call at floor {call.floor} ({call.direction}) already registered.")
            return False

        self._pending.append(call)
        logger.info(f"{self.env.now:.2f} [CallRegistry] Call registered at floor {call.floor} ({call.direction}). Light ON.")
        self.broker.put(f"hall_button/floor_{call.floor}/new_hall_call", {
            "timestamp": self.env.now,
            "floor": call.floor,
            "direction": call.direction
        })
        return True

    def remove_pending(self, call: Call):
        """Remove every pending entry equal to call"""
        self._pending = [c for c in self._pending if c != call]

    def active_call(self, elevator_id: int) -> Optional[Call]:
        """Primary call of the elevator's current trip, or None"""
        return self._active[self._slot(elevator_id)]

    def activate(self, elevator_id: int, call: Call):
        """Record call as the primary call of a new trip"""
        slot = self._slot(elevator_id)
        assert self._active[slot] is None, f"Elevator_{elevator_id} already has an active call"
        self._active[slot] = call
        self._outstanding[call] = elevator_id

    def merge(self, elevator_id: int, call: Call):
        """Record call as an intermediate stop of a trip in progress"""
        assert self._active[self._slot(elevator_id)] is not None, f"Elevator_{elevator_id} has no trip to merge into"
        self._outstanding[call] = elevator_id

    def serve(self, elevator_id: int, call: Call):
        """The elevator reached the call's floor: turn the hall button off"""
        self._outstanding.pop(call, None)
        logger.info(f"{self.env.now:.2f} [CallRegistry] Call served at floor {call.floor} ({call.direction}) by Elevator_{elevator_id}. Light OFF.")
        self.broker.put(f"hall_button/floor_{call.floor}/call_off", {
            "timestamp": self.env.now,
            "floor": call.floor,
            "direction": call.direction,
            "action": "OFF",
            "serviced_by": f"Elevator_{elevator_id}"
        })

    def release(self, elevator_id: int):
        """Trip ended: clear the elevator's active slot"""
        self._active[self._slot(elevator_id)] = None

    def _slot(self, elevator_id: int) -> int:
        assert 1 <= elevator_id <= len(self._active), f"Elevator id {elevator_id} outside fleet of {len(self._active)}"
        return elevator_id - 1
