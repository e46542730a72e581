import logging
from typing import List, Optional

import simpy

from .entity import Entity
from .call import Call, UP
from .call_registry import CallRegistry
from .door import Door
from ..infrastructure.message_broker import MessageBroker

logger = logging.getLogger(__name__)

IDLE = "IDLE"
BUSY = "BUSY"


class Elevator(Entity):
    """
    Elevator car running one trip at a time

    A trip starts when a call is assigned to an idle car and visits one stop
    per cycle: travel, door open, door close, settle. Calls merged while the
    car is busy are queued in `stops`, sorted in travel direction, and taken
    from the head once the current cycle has finished. A leg in progress is
    never interrupted.
    """

    def __init__(self, env: simpy.Environment, elevator_id: int, broker: MessageBroker,
                 registry: CallRegistry, floor_travel_time: float = 2.0,
                 door_open_time: float = 2.5, door_close_time: float = 2.5,
                 settle_margin: float = 5.0):
        super().__init__(env, f"Elevator_{elevator_id}")
        self.elevator_id = elevator_id
        self.broker = broker
        self.registry = registry
        self.floor_travel_time = floor_travel_time
        self.settle_margin = settle_margin
        self.door = Door(env, elevator_id, broker, open_time=door_open_time, close_time=door_close_time)

        self.current_floor = 1
        self.stops: List[Call] = []
        self.phase = None  # MOVING, DOOR, SETTLING while busy
        self._next_call: Optional[Call] = None
        self._wakeup = None
        self.status_topic = f"elevator/{self.name}/status"

        self.set_state(IDLE)

    @property
    def status(self) -> str:
        return self.state

    def is_idle(self) -> bool:
        return self.state == IDLE

    def get_status(self) -> dict:
        """Snapshot consumed by allocation strategies"""
        return {
            "elevator_id": self.elevator_id,
            "state": self.state,
            "current_floor": self.current_floor,
            "active_call": self.registry.active_call(self.elevator_id),
            "stops": list(self.stops),
        }

    def assign(self, call: Call):
        """Start a trip to call.floor"""
        assert self.is_idle(), f"{self.name} is busy, cannot start a new trip"
        assert not self.stops, f"{self.name} is idle with queued stops"
        self._next_call = call
        self.set_state(BUSY)
        logger.info(f"{self.env.now:.2f} [{self.name}] Trip assigned: floor {call.floor} ({call.direction}).")
        if self._wakeup is not None and not self._wakeup.triggered:
            self._wakeup.succeed()

    def merge(self, call: Call):
        """Queue call as an intermediate stop of the current trip"""
        assert not self.is_idle(), f"{self.name} is idle, nothing to merge into"
        self.stops.append(call)
        self.stops.sort(key=lambda stop: stop.floor, reverse=call.direction != UP)
        logger.info(f"{self.env.now:.2f} [{self.name}] Stop merged: floor {call.floor} ({call.direction}). Stops: {[s.floor for s in self.stops]}")
        self._report_status()

    def run(self):
        logger.info(f"{self.env.now:.2f} [{self.name}] Operational at floor {self.current_floor}.")
        while True:
            if self._next_call is None:
                self._wakeup = self.env.event()
                yield self._wakeup
                continue

            yield from self._serve_stop(self._next_call)

            if self.stops:
                self._next_call = self.stops.pop(0)
            else:
                self._next_call = None
                self.phase = None
                self.registry.release(self.elevator_id)
                self.set_state(IDLE)
                logger.info(f"{self.env.now:.2f} [{self.name}] Trip complete. IDLE at floor {self.current_floor}.")

    def _serve_stop(self, call: Call):
        """One stop cycle: travel, door open/close, settle"""
        target = call.floor
        travel_time = self.travel_time(target)

        self.phase = "MOVING"
        logger.info(f"{self.env.now:.2f} [{self.name}] Moving {self.current_floor}F -> {target}F ({travel_time:.1f}s).")
        self.broker.put(f"elevator/{self.name}/move_started", {
            "timestamp": self.env.now,
            "elevator_id": self.elevator_id,
            "from_floor": self.current_floor,
            "to_floor": target,
            "duration_ms": int(round(travel_time * 1000))
        })
        yield self.env.timeout(travel_time)

        self.current_floor = target
        self.registry.serve(self.elevator_id, call)
        self._report_status()

        self.phase = "DOOR"
        yield from self.door.operate(target)

        self.phase = "SETTLING"
        yield self.env.timeout(self.settle_margin)

    def travel_time(self, target_floor: int) -> float:
        return self.floor_travel_time * abs(target_floor - self.current_floor)

    def _log_state_change(self, old_state: str, new_state: str):
        super()._log_state_change(old_state, new_state)
        self._report_status()

    def _report_status(self):
        self.broker.put(self.status_topic, {
            "timestamp": self.env.now,
            "elevator_id": self.elevator_id,
            "state": self.state,
            "current_floor": self.current_floor,
            "stops": [stop.floor for stop in self.stops],
        })
