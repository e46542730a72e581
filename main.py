"""Run a dispatch simulation from a YAML scenario."""

import argparse
import dataclasses
import logging
import random
import sys

import simpy

from config import ConfigurationError, load_simulation_config, SimulationConfig
from controller.elevator_system import ElevatorSystem
from simulator.core.call import UP, DOWN
from simulator.infrastructure.realtime_env import RealtimeEnvironment
from analyzer.statistics import Statistics

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "scenarios/simulation/default.yaml"


def scripted_call_generator(system, scripted_calls):
    """Press the hall buttons listed in the scenario at their given times"""
    env = system.context.env
    for entry in sorted(scripted_calls, key=lambda e: e['time']):
        delay = entry['time'] - env.now
        if delay > 0:
            yield env.timeout(delay)
        system.request_call(entry['floor'], entry['direction'])


def random_call_generator(system, rate, rng):
    """
    Continuous hall call generation

    Args:
        rate: Calls per second (exponential inter-arrival times)
        rng: random.Random used for arrivals, floors and directions
    """
    env = system.context.env
    num_floors = system.context.num_floors
    if num_floors < 2:
        logger.warning("Single-floor building has no hall buttons; random calls disabled.")
        return
    while True:
        yield env.timeout(rng.expovariate(rate))
        floor = rng.randint(1, num_floors)
        if floor == 1:
            direction = UP
        elif floor == num_floors:
            direction = DOWN
        else:
            direction = rng.choice((UP, DOWN))
        system.request_call(floor, direction)


def run_simulation(config: SimulationConfig, log_path=None, plot_path=None):
    """
    Set up and run the entire simulation

    Returns:
        The Statistics recorder of the run
    """
    if config.realtime_factor > 0:
        env_factory = lambda: RealtimeEnvironment(speed_factor=config.realtime_factor)
    else:
        env_factory = simpy.Environment

    system = ElevatorSystem.from_config(config, env_factory=env_factory)
    context = system.context

    sim_stats = Statistics(context.env, context.broker.get_broadcast_pipe())
    sim_stats.set_simulation_metadata(config.to_dict()['simulation'])
    context.env.process(sim_stats.start_listening())

    traffic = config.traffic
    if traffic.scripted_calls:
        context.env.process(scripted_call_generator(system, traffic.scripted_calls))
    if traffic.call_generation_rate > 0:
        rng = random.Random(config.random_seed)
        context.env.process(random_call_generator(system, traffic.call_generation_rate, rng))

    logger.info("--- Simulation Start ---")
    system.run(until=traffic.simulation_duration)
    logger.info("--- Simulation End ---")

    sim_stats.print_summary()
    if log_path:
        sim_stats.save_event_log(log_path)
    if plot_path:
        sim_stats.plot_trajectory_diagram(plot_path)
    return sim_stats


def build_parser():
    parser = argparse.ArgumentParser(description="Multi-elevator dispatch simulation")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG, help="Simulation YAML file")
    parser.add_argument("--floors", help="Override building floor count")
    parser.add_argument("--elevators", help="Override elevator count")
    parser.add_argument("--duration", type=float, help="Override simulation duration (seconds)")
    parser.add_argument("--realtime", type=float, help="Real-time speed factor (0 = as fast as possible)")
    parser.add_argument("--log", help="Write JSON Lines event log to this file")
    parser.add_argument("--plot", help="Save trajectory diagram to this PNG file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(levelname)s] %(name)s - %(message)s'
    )

    try:
        config = load_simulation_config(args.config)
        if args.floors is not None or args.elevators is not None:
            config = dataclasses.replace(
                config,
                building=dataclasses.replace(config.building, num_floors=config.building.num_floors if args.floors is None else args.floors),
                elevator=dataclasses.replace(config.elevator, num_elevators=config.elevator.num_elevators if args.elevators is None else args.elevators)
            )
        if args.duration is not None:
            config = dataclasses.replace(
                config, traffic=dataclasses.replace(config.traffic, simulation_duration=args.duration))
        if args.realtime is not None:
            config = dataclasses.replace(config, realtime_factor=args.realtime)
        config.validate()
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    run_simulation(config, log_path=args.log, plot_path=args.plot)
    return 0


if __name__ == '__main__':
    sys.exit(main())
