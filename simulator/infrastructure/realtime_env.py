"""
RealtimeEnvironment

A SimPy environment that paces simulation time against the wall clock, so
the scheduler tick and trip phases play out in real seconds for a
presentation front end.
"""

import logging
import time

import simpy

logger = logging.getLogger(__name__)


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with real-time synchronization.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (1 sim second = 1 real second)
            - 2.0 = double speed
            - 0.0 = no delay (plain SimPy behavior)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=1.0)
    """

    def __init__(self, speed_factor=1.0, initial_time=0):
        super().__init__(initial_time=initial_time)
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def step(self):
        """
        Execute one simulation step, then sleep until the wall clock has
        caught up with simulation time.
        """
        result = super().step()

        if self.speed_factor > 0:
            sim_elapsed = self.now - self.sim_start_time
            target_real_time = self.real_start_time + (sim_elapsed / self.speed_factor)
            sleep_time = target_real_time - time.monotonic()
            if sleep_time > 0:
                time.sleep(sleep_time)

        return result

    def set_speed(self, speed_factor):
        """Change simulation speed, re-anchoring the timing references"""
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        logger.info(f"{self.now:.2f} [RealtimeEnv] Speed factor {self.speed_factor} -> {speed_factor}")
        self.speed_factor = speed_factor
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def get_speed(self):
        return self.speed_factor
