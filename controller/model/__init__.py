"""Controller-side data model"""

from .elevator import ElevatorState, Direction, DoorStatus
from .building import BuildingState, BuildingSnapshot, ElevatorSnapshot

__all__ = [
    'ElevatorState',
    'Direction',
    'DoorStatus',
    'BuildingState',
    'BuildingSnapshot',
    'ElevatorSnapshot',
]
