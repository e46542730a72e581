import logging

import simpy

from ..infrastructure.message_broker import MessageBroker

logger = logging.getLogger(__name__)


class Door:
    """
    Car door driven directly by its elevator

    One operation is a door-open phase followed by a door-close phase of
    fixed durations. There is no passenger-triggered hold or reopen.
    """
    def __init__(self, env: simpy.Environment, elevator_id: int, broker: MessageBroker,
                 open_time: float = 2.5, close_time: float = 2.5):
        self.env = env
        self.elevator_id = elevator_id
        self.elevator_name = f"Elevator_{elevator_id}"
        self.broker = broker
        self.open_time = open_time
        self.close_time = close_time
        self.state = "CLOSED"  # CLOSED, OPEN, CLOSING

    def operate(self, floor: int):
        """Open the door, hold it for open_time, then close it over close_time"""
        self.state = "OPEN"
        logger.info(f"{self.env.now:.2f} [{self.elevator_name}] Door opened at floor {floor}.")
        self._broadcast_door_event("DOOR_OPENED", floor)
        yield self.env.timeout(self.open_time)

        self.state = "CLOSING"
        logger.info(f"{self.env.now:.2f} [{self.elevator_name}] Door closing at floor {floor}.")
        self._broadcast_door_event("DOOR_CLOSED", floor)
        yield self.env.timeout(self.close_time)
        self.state = "CLOSED"

    def _broadcast_door_event(self, event_type: str, floor: int):
        self.broker.put(f"elevator/{self.elevator_name}/door_events", {
            "timestamp": self.env.now,
            "elevator_id": self.elevator_id,
            "elevator_name": self.elevator_name,
            "event_type": event_type,
            "floor": floor
        })
