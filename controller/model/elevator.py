"""
Elevator - Local mirror of one remote elevator's dynamic state

The entity is created once per session and updated in place every cycle
by the StateSynchronizer. Only the `automatic` flag is owned locally.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Set


class Direction(IntEnum):
    """Committed direction (values are the remote endpoint's wire values)"""
    UP = 0
    DOWN = 1
    UNCOMMITTED = 2


class DoorStatus(IntEnum):
    """Door status (values are the remote endpoint's wire values)"""
    OPEN = 1
    CLOSED = 2
    OPENING = 3
    CLOSING = 4


@dataclass(eq=False)
class ElevatorState:
    """
    Dynamic state of a single elevator as last reported by the remote side.

    Attributes:
        current_floor: Floor the elevator is at (or last passed)
        current_target: Floor the elevator is heading to
        current_speed: Speed in m/s (0 when standing)
        current_acceleration: Acceleration in m/s²
        current_height_over_ground: Position in meters
        current_passenger_weight: Payload in kg
        max_passenger_number: Capacity in persons
        committed_direction: Direction the elevator is committed to
        door_status: Current door status
        active_floor_buttons: Floors whose cab button is lit
        automatic: True when the sweep policy drives this elevator
    """
    current_floor: int = 0
    current_target: int = 0
    current_speed: float = 0.0
    current_acceleration: float = 0.0
    current_height_over_ground: float = 0.0
    current_passenger_weight: float = 0.0
    max_passenger_number: int = 0
    committed_direction: Direction = Direction.UNCOMMITTED
    door_status: DoorStatus = DoorStatus.CLOSED
    active_floor_buttons: Set[int] = field(default_factory=set)
    automatic: bool = False

    def is_parked(self) -> bool:
        """Standing still with doors fully open"""
        return self.current_speed == 0 and self.door_status == DoorStatus.OPEN

    def has_arrived(self) -> bool:
        """Parked at its own target floor"""
        return self.current_floor == self.current_target and self.is_parked()
