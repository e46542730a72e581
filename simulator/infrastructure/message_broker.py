import logging

import simpy

logger = logging.getLogger(__name__)


class MessageBroker:
    """
    Mediates communication between the dispatch core and its listeners.
    Implements a topic-based publish-subscribe model.

    A topic pipe only exists once someone has asked for it, and the broadcast
    pipe only once a recorder has asked for it, so a simulation without
    listeners does not accumulate undelivered messages.
    """
    def __init__(self, env: simpy.Environment):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
        """
        self.env = env
        self.topics = {}  # Dictionary to hold Store for each topic
        self.broadcast_pipe = None

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic

        Returns the Store put event of the topic pipe, or None when nobody
        listens on that topic.
        """
        logger.debug(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        if self.broadcast_pipe is not None:
            self.broadcast_pipe.put({'topic': topic, 'message': message})
        pipe = self.topics.get(topic)
        if pipe is None:
            return None
        return pipe.put(message)

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Returns the global broadcast pipe carrying every published message
        as {'topic': ..., 'message': ...}
        """
        if self.broadcast_pipe is None:
            self.broadcast_pipe = simpy.Store(self.env)
        return self.broadcast_pipe

    def get_current_time(self) -> float:
        """
        Get current simulation time

        Lets controller code read the clock without depending on the
        SimPy environment directly.
        """
        return self.env.now
