"""
Analyzer - Observers of the published controller state
"""

from .state_monitor import ConsoleStateMonitor

__all__ = ['ConsoleStateMonitor']
