import simpy
from typing import Any, Callable, Dict, List

# Topics used by the controller
STATE_TOPIC = "ecc/state"
CONNECTION_TOPIC = "ecc/connection"


class MessageBroker:
    """
    Mediates communication between the controller and its observers.
    Implements a topic-based publish-subscribe model.

    Two delivery styles are supported for every topic:
    - Subscribers: callables invoked synchronously inside put()
    - Pipes: a simpy.Store per topic, drained by SimPy processes
    """
    def __init__(self, env: simpy.Environment, log_messages: bool = True):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            log_messages (bool): Print every published message
        """
        self.env = env
        self.log_messages = log_messages
        self.topics = {}  # Dictionary to hold Store for each topic
        self.subscribers: Dict[str, List[Callable[[Any], None]]] = {}
        self.broadcast_pipe = None  # Created on first request

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def subscribe(self, topic: str, callback: Callable[[Any], None]):
        """
        Register a callback invoked with every message published on the topic
        """
        callbacks = self.subscribers.setdefault(topic, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, topic: str, callback: Callable[[Any], None]):
        callbacks = self.subscribers.get(topic, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic

        Subscribers are called first, in registration order. The message is
        then queued on the topic pipe and on the broadcast pipe, but only if
        a consumer has asked for them; unread pipes would grow forever.
        """
        if self.log_messages:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        for callback in list(self.subscribers.get(topic, [])):
            callback(message)
        if self.broadcast_pipe is not None:
            self.broadcast_pipe.put({'topic': topic, 'message': message})
        if topic in self.topics:
            return self.topics[topic].put(message)
        return None

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Returns the global broadcast pipe (every message of every topic)
        """
        if self.broadcast_pipe is None:
            self.broadcast_pipe = simpy.Store(self.env)
        return self.broadcast_pipe

    def get_current_time(self) -> float:
        """
        Get current time of the SimPy environment

        Keeps components that only log or timestamp independent of the
        environment object.
        """
        return self.env.now
