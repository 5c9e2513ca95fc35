"""
Operator panel - HTTP access to the manual commands and the latest state
"""

from .command_queue import OperatorCommand, OperatorCommandQueue
from .state_cache import LatestStateCache
from .http_api import create_app, run_server_in_thread

__all__ = [
    'OperatorCommand',
    'OperatorCommandQueue',
    'LatestStateCache',
    'create_app',
    'run_server_in_thread',
]
