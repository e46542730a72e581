"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .realtime_env import RealtimeEnvironment

__all__ = [
    'MessageBroker',
    'RealtimeEnvironment',
]
