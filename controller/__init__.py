"""
Elevator Control Center

This package polls a remote elevator system, keeps a local model of it,
and drives the elevators automatically or on behalf of an operator.
"""

__version__ = "0.1.0"

from .supervisor import CycleSupervisor, ConnectionState
from .synchronizer import StateSynchronizer
from .dispatch import DispatchEngine
from .update_timer import UpdateTimer

__all__ = ['CycleSupervisor', 'ConnectionState', 'StateSynchronizer', 'DispatchEngine', 'UpdateTimer']
