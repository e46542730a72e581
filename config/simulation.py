"""
Simulation Configuration

Building size, fleet size, trip timing, scheduler tick and traffic settings.
Every dataclass validates itself on construction and raises
ConfigurationError, so an invalid file never produces a half-built fleet.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


class ConfigurationError(ValueError):
    """Raised for non-positive or non-numeric configuration values"""


def parse_count(value: Any, name: str) -> int:
    """
    Parse a floor or elevator count coming from an operator

    Accepts ints and integral strings/floats ("4", 4.0). Anything else
    (booleans, fractional numbers, text, None) or a value <= 0 is rejected.

    Raises:
        ConfigurationError: If the value is not a positive integer
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigurationError(f"{name} must be a whole number, got {value!r}")
        value = int(value)
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if count <= 0:
        raise ConfigurationError(f"{name} must be positive, got {count}")
    return count


def parse_number(value: Any, name: str) -> float:
    """
    Parse a duration or rate, accepting numbers and numeric strings ("2.0")

    Raises:
        ConfigurationError: If the value is not a number
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


@dataclass
class BuildingConfig:
    """Building specifications"""
    num_floors: int = 10

    def __post_init__(self):
        self.num_floors = parse_count(self.num_floors, "num_floors")


@dataclass
class ElevatorConfig:
    """Fleet specifications"""
    num_elevators: int = 3

    def __post_init__(self):
        self.num_elevators = parse_count(self.num_elevators, "num_elevators")


@dataclass
class TimingConfig:
    """Trip phase durations, in seconds"""
    floor_travel_time: float = 2.0  # per floor, symmetric up/down
    door_open_time: float = 2.5
    door_close_time: float = 2.5
    settle_margin: float = 5.0  # flat buffer after door close before the next leg

    def __post_init__(self):
        self.floor_travel_time = parse_number(self.floor_travel_time, "floor_travel_time")
        self.door_open_time = parse_number(self.door_open_time, "door_open_time")
        self.door_close_time = parse_number(self.door_close_time, "door_close_time")
        self.settle_margin = parse_number(self.settle_margin, "settle_margin")
        if self.floor_travel_time <= 0:
            raise ConfigurationError("floor_travel_time must be positive")
        if self.door_open_time < 0:
            raise ConfigurationError("door_open_time cannot be negative")
        if self.door_close_time < 0:
            raise ConfigurationError("door_close_time cannot be negative")
        if self.settle_margin < 0:
            raise ConfigurationError("settle_margin cannot be negative")


@dataclass
class SchedulerConfig:
    """Dispatch scheduler settings"""
    tick_interval: float = 0.05  # seconds between scheduler ticks

    def __post_init__(self):
        self.tick_interval = parse_number(self.tick_interval, "tick_interval")
        if self.tick_interval <= 0:
            raise ConfigurationError("tick_interval must be positive")


@dataclass
class TrafficConfig:
    """Call generation for CLI runs"""
    simulation_duration: float = 300.0  # seconds
    call_generation_rate: float = 0.0  # random calls per second, 0 = scripted only
    scripted_calls: List[Dict[str, Any]] = field(default_factory=list)  # {time, floor, direction}

    def __post_init__(self):
        self.simulation_duration = parse_number(self.simulation_duration, "simulation_duration")
        self.call_generation_rate = parse_number(self.call_generation_rate, "call_generation_rate")
        if self.simulation_duration <= 0:
            raise ConfigurationError("simulation_duration must be positive")
        if self.call_generation_rate < 0:
            raise ConfigurationError("call_generation_rate cannot be negative")
        calls = []
        for entry in self.scripted_calls:
            if not isinstance(entry, dict):
                raise ConfigurationError(f"scripted call must be a mapping, got {entry!r}")
            missing = {'time', 'floor', 'direction'} - set(entry)
            if missing:
                raise ConfigurationError(f"scripted call {entry} is missing {sorted(missing)}")
            calls.append(dict(entry,
                              time=parse_number(entry['time'], "scripted call time"),
                              floor=parse_count(entry['floor'], "scripted call floor")))
        self.scripted_calls = calls


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines building, fleet, timing, scheduler and traffic settings.
    """
    building: BuildingConfig = field(default_factory=BuildingConfig)
    elevator: ElevatorConfig = field(default_factory=ElevatorConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)

    # Simulation control
    random_seed: Optional[int] = None
    realtime_factor: float = 0.0  # 1.0 = realtime, 0.0 = as fast as possible

    def __post_init__(self):
        self.realtime_factor = parse_number(self.realtime_factor, "realtime_factor")
        if self.realtime_factor < 0:
            raise ConfigurationError("realtime_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")
        sim_data = data.get('simulation', data)

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 10)
        )

        elevator_data = sim_data.get('elevator', {})
        elevator = ElevatorConfig(
            num_elevators=elevator_data.get('num_elevators', 3)
        )

        timing_data = sim_data.get('timing', {})
        timing = TimingConfig(
            floor_travel_time=timing_data.get('floor_travel_time', 2.0),
            door_open_time=timing_data.get('door_open_time', 2.5),
            door_close_time=timing_data.get('door_close_time', 2.5),
            settle_margin=timing_data.get('settle_margin', 5.0)
        )

        scheduler_data = sim_data.get('scheduler', {})
        scheduler = SchedulerConfig(
            tick_interval=scheduler_data.get('tick_interval', 0.05)
        )

        traffic_data = sim_data.get('traffic', {})
        traffic = TrafficConfig(
            simulation_duration=traffic_data.get('simulation_duration', 300.0),
            call_generation_rate=traffic_data.get('call_generation_rate', 0.0),
            scripted_calls=list(traffic_data.get('scripted_calls') or [])
        )

        return cls(
            building=building,
            elevator=elevator,
            timing=timing,
            scheduler=scheduler,
            traffic=traffic,
            random_seed=sim_data.get('random_seed'),
            realtime_factor=sim_data.get('realtime_factor', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors
                },
                'elevator': {
                    'num_elevators': self.elevator.num_elevators
                },
                'timing': {
                    'floor_travel_time': self.timing.floor_travel_time,
                    'door_open_time': self.timing.door_open_time,
                    'door_close_time': self.timing.door_close_time,
                    'settle_margin': self.timing.settle_margin
                },
                'scheduler': {
                    'tick_interval': self.scheduler.tick_interval
                },
                'traffic': {
                    'simulation_duration': self.traffic.simulation_duration,
                    'call_generation_rate': self.traffic.call_generation_rate,
                    'scripted_calls': [dict(entry) for entry in self.traffic.scripted_calls]
                },
                'realtime_factor': self.realtime_factor
            }
        }

        if self.random_seed is not None:
            result['simulation']['random_seed'] = self.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        for entry in self.traffic.scripted_calls:
            floor = entry['floor']
            if not (1 <= floor <= self.building.num_floors):
                raise ConfigurationError(
                    f"scripted call floor ({floor}) must be between 1 and {self.building.num_floors}")
            if entry['direction'] not in ("UP", "DOWN"):
                raise ConfigurationError(
                    f"scripted call direction must be 'UP' or 'DOWN', got {entry['direction']!r}")
            if entry['direction'] == "UP" and floor == self.building.num_floors:
                raise ConfigurationError(f"scripted call: no UP button on the top floor ({floor})")
            if entry['direction'] == "DOWN" and floor == 1:
                raise ConfigurationError("scripted call: no DOWN button on floor 1")
            if entry['time'] < 0:
                raise ConfigurationError("scripted call time cannot be negative")
