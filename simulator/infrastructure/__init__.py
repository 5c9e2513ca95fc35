"""Infrastructure components shared by controller and simulator"""

from .message_broker import MessageBroker, STATE_TOPIC, CONNECTION_TOPIC

__all__ = [
    'MessageBroker',
    'STATE_TOPIC',
    'CONNECTION_TOPIC',
]
