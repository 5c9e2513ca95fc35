"""Interfaces between the controller and its collaborators"""

from .elevator_port import IElevatorPort, ElevatorConnectionError
from .state_observer import IStateObserver

__all__ = [
    'IElevatorPort',
    'ElevatorConnectionError',
    'IStateObserver',
]
