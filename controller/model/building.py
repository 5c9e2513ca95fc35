"""
Building - Controller-side aggregate of the whole elevator installation

This module provides:
- BuildingState: the single mutable aggregate owned by the CycleSupervisor
- BuildingSnapshot / ElevatorSnapshot: immutable views handed to observers
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, FrozenSet, Dict, Any

from .elevator import ElevatorState, Direction, DoorStatus


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Immutable copy of one ElevatorState"""
    index: int
    current_floor: int
    current_target: int
    current_speed: float
    current_acceleration: float
    current_height_over_ground: float
    current_passenger_weight: float
    max_passenger_number: int
    committed_direction: Direction
    door_status: DoorStatus
    active_floor_buttons: FrozenSet[int]
    automatic: bool

    @classmethod
    def from_state(cls, index: int, elevator: ElevatorState) -> 'ElevatorSnapshot':
        return cls(
            index=index,
            current_floor=elevator.current_floor,
            current_target=elevator.current_target,
            current_speed=elevator.current_speed,
            current_acceleration=elevator.current_acceleration,
            current_height_over_ground=elevator.current_height_over_ground,
            current_passenger_weight=elevator.current_passenger_weight,
            max_passenger_number=elevator.max_passenger_number,
            committed_direction=elevator.committed_direction,
            door_status=elevator.door_status,
            active_floor_buttons=frozenset(elevator.active_floor_buttons),
            automatic=elevator.automatic
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            'index': self.index,
            'current_floor': self.current_floor,
            'current_target': self.current_target,
            'current_speed': self.current_speed,
            'current_acceleration': self.current_acceleration,
            'current_height_over_ground': self.current_height_over_ground,
            'current_passenger_weight': self.current_passenger_weight,
            'max_passenger_number': self.max_passenger_number,
            'committed_direction': self.committed_direction.name,
            'door_status': self.door_status.name,
            'active_floor_buttons': sorted(self.active_floor_buttons),
            'automatic': self.automatic
        }


@dataclass(frozen=True)
class BuildingSnapshot:
    """
    Immutable view of the BuildingState at the end of a cycle.

    Observers may keep and read it from any thread.
    """
    number_of_floors: int
    number_of_elevators: int
    floor_height: float
    elevators: Tuple[ElevatorSnapshot, ...]
    floor_buttons_up: FrozenSet[int]
    floor_buttons_down: FrozenSet[int]
    selected_elevator: Optional[int]

    @property
    def selected(self) -> Optional[ElevatorSnapshot]:
        """Snapshot of the selected elevator (None without elevators)"""
        if self.selected_elevator is None:
            return None
        return self.elevators[self.selected_elevator]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            'number_of_floors': self.number_of_floors,
            'number_of_elevators': self.number_of_elevators,
            'floor_height': self.floor_height,
            'elevators': [e.to_dict() for e in self.elevators],
            'floor_buttons_up': sorted(self.floor_buttons_up),
            'floor_buttons_down': sorted(self.floor_buttons_down),
            'selected_elevator': self.selected_elevator
        }


@dataclass
class BuildingState:
    """
    Mutable aggregate holding everything the controller knows about the building.

    The static facts (floor count, elevator count, floor height) are fixed when
    the instance is created after a successful connection. The elevator list
    is allocated once here and never resized afterward.

    Attributes:
        number_of_floors: Floors served (indices 0 .. number_of_floors - 1)
        number_of_elevators: Elevators in the installation
        floor_height: Height of one floor in meters
        elevators: One ElevatorState per elevator, index-addressed
        floor_buttons_up: Floors with the hall UP button lit
        floor_buttons_down: Floors with the hall DOWN button lit
        selected_elevator: Elevator currently selected by the operator
    """
    number_of_floors: int = 0
    number_of_elevators: int = 0
    floor_height: float = 1.0
    elevators: List[ElevatorState] = field(default_factory=list)
    floor_buttons_up: Set[int] = field(default_factory=set)
    floor_buttons_down: Set[int] = field(default_factory=set)
    selected_elevator: Optional[int] = None

    def __post_init__(self):
        if self.number_of_floors < 0:
            raise ValueError(f"number_of_floors cannot be negative, got {self.number_of_floors}")
        if self.number_of_elevators < 0:
            raise ValueError(f"number_of_elevators cannot be negative, got {self.number_of_elevators}")
        if self.floor_height <= 0:
            raise ValueError(f"floor_height must be positive, got {self.floor_height}")

        # Allocate one entity per elevator, exactly once
        if not self.elevators:
            self.elevators = [ElevatorState() for _ in range(self.number_of_elevators)]
        elif len(self.elevators) != self.number_of_elevators:
            raise ValueError(
                f"elevators list length ({len(self.elevators)}) must match "
                f"number_of_elevators ({self.number_of_elevators})"
            )

        if self.selected_elevator is None and self.number_of_elevators > 0:
            self.selected_elevator = 0

    @property
    def top_floor(self) -> int:
        return self.number_of_floors - 1

    def is_valid_elevator(self, index: int) -> bool:
        return 0 <= index < self.number_of_elevators

    def is_valid_floor(self, floor: int) -> bool:
        return 0 <= floor < self.number_of_floors

    def get_elevator(self, index: int) -> ElevatorState:
        """
        Get the elevator entity at the given index.

        Raises:
            IndexError: If index is out of range
        """
        if not self.is_valid_elevator(index):
            raise IndexError(f"Invalid elevator index: {index}")
        return self.elevators[index]

    def snapshot(self) -> BuildingSnapshot:
        """Build an immutable view of the current state"""
        return BuildingSnapshot(
            number_of_floors=self.number_of_floors,
            number_of_elevators=self.number_of_elevators,
            floor_height=self.floor_height,
            elevators=tuple(
                ElevatorSnapshot.from_state(i, e) for i, e in enumerate(self.elevators)
            ),
            floor_buttons_up=frozenset(self.floor_buttons_up),
            floor_buttons_down=frozenset(self.floor_buttons_down),
            selected_elevator=self.selected_elevator
        )

    def __repr__(self) -> str:
        return (f"BuildingState(floors={self.number_of_floors}, "
                f"elevators={self.number_of_elevators}, selected={self.selected_elevator})")
