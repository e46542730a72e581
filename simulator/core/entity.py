import itertools
import logging
from abc import ABC, abstractmethod
from typing import Optional

import simpy

logger = logging.getLogger(__name__)


class Entity(ABC):
    """
    Abstract base class for entities in SimPy simulation.

    An entity owns one SimPy process, started from the constructor, and a
    string state whose transitions are logged.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: Optional[str] = None):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. If not specified, auto-generated from class name and ID.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"

        # Concrete classes set their own initial state after super().__init__()
        self.state: str = "initial_state"

        # run() does not execute until the environment processes the
        # process's Initialize event, so subclasses may finish setup first
        self._process = self.env.process(self.run())

        logger.debug(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) created.')

    @abstractmethod
    def run(self):
        """
        Generator that serves as the entity's SimPy process body.

        Use yield to wait for events and advance simulation time.
        """

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: Target state.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._log_state_change(old_state, new_state)

    def get_state(self) -> str:
        """Get the current state of the entity."""
        return self.state

    def _log_state_change(self, old_state: str, new_state: str):
        logger.debug(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) state transition: {old_state} -> {new_state}')

    @property
    def process(self) -> simpy.Process:
        """SimPy process object for this entity."""
        return self._process
