"""
Elevator System

Command surface used by the presentation side: configure the building,
press hall buttons, advance the simulation. Every configuration builds a
fresh DispatchContext; nothing is shared between contexts.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import simpy

from config.simulation import (
    ConfigurationError,
    SimulationConfig,
    BuildingConfig,
    ElevatorConfig,
    parse_count
)
from simulator.core.call import Call, UP, DOWN
from simulator.core.call_registry import CallRegistry
from simulator.core.elevator import Elevator
from simulator.infrastructure.message_broker import MessageBroker
from .algorithms.intermediate_stop import IntermediateStopStrategy
from .group_control import GroupControlSystem
from .interfaces.allocation_strategy import IAllocationStrategy

logger = logging.getLogger(__name__)


@dataclass
class DispatchContext:
    """All mutable state of one configured simulation"""
    config: SimulationConfig
    env: simpy.Environment
    broker: MessageBroker
    registry: CallRegistry
    elevators: List[Elevator]
    gcs: GroupControlSystem

    @property
    def num_floors(self) -> int:
        return self.config.building.num_floors

    def get_elevator(self, elevator_id: int) -> Elevator:
        assert 1 <= elevator_id <= len(self.elevators), f"Elevator id {elevator_id} outside fleet of {len(self.elevators)}"
        return self.elevators[elevator_id - 1]


def build_context(config: SimulationConfig,
                  env_factory: Callable[[], simpy.Environment] = simpy.Environment,
                  strategy: Optional[IAllocationStrategy] = None) -> DispatchContext:
    """Create env, broker, registry, fleet and scheduler for config"""
    env = env_factory()
    broker = MessageBroker(env)
    num_elevators = config.elevator.num_elevators
    registry = CallRegistry(env, num_elevators, broker)

    timing = config.timing
    elevators = [
        Elevator(
            env, elevator_id, broker, registry,
            floor_travel_time=timing.floor_travel_time,
            door_open_time=timing.door_open_time,
            door_close_time=timing.door_close_time,
            settle_margin=timing.settle_margin
        )
        for elevator_id in range(1, num_elevators + 1)
    ]

    gcs = GroupControlSystem("GCS", broker, registry, strategy or IntermediateStopStrategy(),
                             tick_interval=config.scheduler.tick_interval)
    for elevator in elevators:
        gcs.register_elevator(elevator)
    env.process(gcs.run())

    logger.info(f"{env.now:.2f} [System] Configured {config.building.num_floors} floors, {num_elevators} elevators.")
    return DispatchContext(config, env, broker, registry, elevators, gcs)


class ElevatorSystem:
    """
    Entry point for the presentation collaborator

    Usage:
        system = ElevatorSystem()
        system.configure(10, 3)
        system.request_call(6, "UP")
        system.run(until=60)
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 env_factory: Callable[[], simpy.Environment] = simpy.Environment,
                 strategy_factory: Callable[[], IAllocationStrategy] = IntermediateStopStrategy):
        self.base_config = config or SimulationConfig()
        self.env_factory = env_factory
        self.strategy_factory = strategy_factory
        self.context: Optional[DispatchContext] = None

    @classmethod
    def from_config(cls, config: SimulationConfig, **kwargs) -> 'ElevatorSystem':
        """Create a system already configured from config"""
        system = cls(config, **kwargs)
        system.configure(config.building.num_floors, config.elevator.num_elevators)
        return system

    def configure(self, floor_count: Any, elevator_count: Any) -> DispatchContext:
        """
        Rebuild the whole fleet

        Raises:
            ConfigurationError: If either count is non-numeric or not positive.
                The current context is left untouched.
        """
        num_floors = parse_count(floor_count, "floor count")
        num_elevators = parse_count(elevator_count, "elevator count")

        config = dataclasses.replace(
            self.base_config,
            building=BuildingConfig(num_floors=num_floors),
            elevator=ElevatorConfig(num_elevators=num_elevators)
        )
        config.validate()
        self.context = build_context(config, self.env_factory, self.strategy_factory())
        return self.context

    def request_call(self, floor: int, direction: str) -> bool:
        """
        Press the hall button at floor for direction

        Returns:
            True if a new call was registered, False if it was already lit

        Raises:
            ConfigurationError: If the system has not been configured
            ValueError: If the building has no such button
        """
        context = self._require_context()
        call = Call(floor, direction)
        if call.floor > context.num_floors:
            raise ValueError(f"floor must be between 1 and {context.num_floors}, got {call.floor}")
        if call.direction == UP and call.floor == context.num_floors:
            raise ValueError(f"No UP button on the top floor ({call.floor})")
        if call.direction == DOWN and call.floor == 1:
            raise ValueError("No DOWN button on floor 1")
        return context.registry.submit(call)

    def run(self, until: Optional[float] = None):
        """Advance the simulation clock to `until`"""
        self._require_context().env.run(until=until)

    @property
    def now(self) -> float:
        return self._require_context().env.now

    @property
    def elevators(self) -> List[Elevator]:
        return self._require_context().elevators

    def _require_context(self) -> DispatchContext:
        if self.context is None:
            raise ConfigurationError("Elevator system is not configured")
        return self.context
