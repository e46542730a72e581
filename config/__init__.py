"""
Configuration management package

Provides the simulation configuration classes and the YAML loader.
"""

from .simulation import (
    ConfigurationError,
    SimulationConfig,
    BuildingConfig,
    ElevatorConfig,
    TimingConfig,
    SchedulerConfig,
    TrafficConfig,
    parse_count,
    parse_number
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Simulation
    'ConfigurationError',
    'SimulationConfig',
    'BuildingConfig',
    'ElevatorConfig',
    'TimingConfig',
    'SchedulerConfig',
    'TrafficConfig',
    'parse_count',
    'parse_number',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
