"""
Elevator Simulator - A stand-in for the remote elevator system

This package provides a small simulated building that implements the
controller's elevator port, an XML-RPC server exposing it, and the
message broker shared with the controller.
"""

__version__ = "0.1.0"

from .building_simulator import SimulatedBuilding, SimulatedElevatorPort
from .infrastructure.message_broker import MessageBroker

__all__ = [
    'SimulatedBuilding',
    'SimulatedElevatorPort',
    'MessageBroker',
]
