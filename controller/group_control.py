import logging
from typing import List, Optional

from simulator.core.call import Call
from simulator.core.call_registry import CallRegistry
from simulator.core.elevator import Elevator
from simulator.infrastructure.message_broker import MessageBroker
from .interfaces.allocation_strategy import IAllocationStrategy

logger = logging.getLogger(__name__)


class GroupControlSystem:
    """
    Group Control System driving dispatch on a fixed scheduler tick

    This is a controller, not a simulated entity. Each tick it scans the
    pending hall calls in arrival order and dispatches the first one the
    allocation strategy can place. At most one call is dispatched per tick,
    even when several elevators are free.
    """
    def __init__(self, name: str, broker: MessageBroker, registry: CallRegistry,
                 strategy: IAllocationStrategy, tick_interval: float = 0.05):
        self.name = name
        self.broker = broker
        self.registry = registry
        self.strategy = strategy
        self.tick_interval = tick_interval
        self.elevators = {}  # elevator_id -> Elevator, in registration order

        logger.info(f"{self.broker.get_current_time():.2f} [GCS] Using strategy: {self.strategy.get_strategy_name()}")

    def register_elevator(self, elevator: Elevator):
        """Register an elevator under GCS management"""
        self.elevators[elevator.elevator_id] = elevator
        logger.debug(f"{self.broker.get_current_time():.2f} [GCS] Elevator '{elevator.name}' registered.")

    def tick(self) -> Optional[Call]:
        """
        Run one scheduling pass

        Returns:
            The dispatched call, or None if nothing could be dispatched
        """
        pending: List[Call] = self.registry.pending
        if not pending:
            return None

        statuses = {elevator_id: elevator.get_status() for elevator_id, elevator in self.elevators.items()}
        for call in pending:
            elevator_id = self.strategy.select_elevator(call, statuses)
            if elevator_id is None:
                continue
            self.dispatch(elevator_id, call)
            return call
        return None

    def dispatch(self, elevator_id: int, call: Call):
        """Hand call to the elevator: start a trip if idle, else merge it"""
        assert elevator_id in self.elevators, f"Strategy selected unknown elevator id {elevator_id}"
        elevator = self.elevators[elevator_id]

        self.registry.remove_pending(call)
        if elevator.is_idle():
            self.registry.activate(elevator_id, call)
            elevator.assign(call)
            assignment = "TRIP"
        else:
            self.registry.merge(elevator_id, call)
            elevator.merge(call)
            assignment = "MERGE"

        logger.info(f"{self.broker.get_current_time():.2f} [GCS] Assigned hall call to {elevator.name}: Floor {call.floor} {call.direction} ({assignment})")
        self.broker.put('gcs/hall_call_assignment', {
            "timestamp": self.broker.get_current_time(),
            "floor": call.floor,
            "direction": call.direction,
            "assigned_elevator": elevator.name,
            "assignment": assignment
        })

    def run(self):
        """
        Main process of GCS. Ticks every tick_interval
        """
        logger.info(f"{self.broker.get_current_time():.2f} [GCS] GCS is operational. Tick every {self.tick_interval}s.")
        while True:
            self.tick()
            yield self.broker.env.timeout(self.tick_interval)
