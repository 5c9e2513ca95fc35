"""
Elevator Port Interface

Defines the operations the controller needs from a remote elevator system.
"""

from abc import ABC, abstractmethod

from ..model.elevator import Direction, DoorStatus


class ElevatorConnectionError(ConnectionError):
    """
    Raised by a port when the remote elevator system cannot be reached
    or a call fails at the transport level.

    Always recoverable: the CycleSupervisor reconnects on the next tick.
    """
    def __init__(self, operation: str, reason=None):
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class IElevatorPort(ABC):
    """
    Interface to a remote elevator system (simulator or real controller)

    All indices are 0-based. Every operation may raise
    ElevatorConnectionError; implementations must translate their own
    transport errors into it.

    Static building facts (queried once per session):
        get_floor_num, get_elevator_num, get_floor_height

    Dynamic state (queried every cycle):
        floor buttons per floor, elevator status per elevator,
        cab buttons per elevator and floor

    Commands:
        set_committed_direction, set_target

    Usage Examples:
    - XmlRpcElevatorPort: network client for a remote endpoint
    - SimulatedElevatorPort: in-process simulated building
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Open (or re-open) the connection to the remote system

        Raises:
            ElevatorConnectionError: If the remote system is unreachable
        """
        pass

    # --- Static building facts ---

    @abstractmethod
    def get_floor_num(self) -> int:
        pass

    @abstractmethod
    def get_elevator_num(self) -> int:
        pass

    @abstractmethod
    def get_floor_height(self) -> float:
        pass

    # --- Hall buttons ---

    @abstractmethod
    def get_floor_button_up(self, floor: int) -> bool:
        pass

    @abstractmethod
    def get_floor_button_down(self, floor: int) -> bool:
        pass

    # --- Elevator status ---

    @abstractmethod
    def get_committed_direction(self, elevator: int) -> Direction:
        pass

    @abstractmethod
    def get_target(self, elevator: int) -> int:
        pass

    @abstractmethod
    def get_elevator_accel(self, elevator: int) -> float:
        pass

    @abstractmethod
    def get_elevator_door_status(self, elevator: int) -> DoorStatus:
        pass

    @abstractmethod
    def get_elevator_floor(self, elevator: int) -> int:
        pass

    @abstractmethod
    def get_elevator_position(self, elevator: int) -> float:
        """Height over ground in meters"""
        pass

    @abstractmethod
    def get_elevator_speed(self, elevator: int) -> float:
        pass

    @abstractmethod
    def get_elevator_weight(self, elevator: int) -> float:
        pass

    @abstractmethod
    def get_elevator_capacity(self, elevator: int) -> int:
        pass

    @abstractmethod
    def get_elevator_button(self, elevator: int, floor: int) -> bool:
        """True if the cab button for `floor` is lit in `elevator`"""
        pass

    # --- Commands ---

    @abstractmethod
    def set_committed_direction(self, elevator: int, direction: Direction) -> None:
        pass

    @abstractmethod
    def set_target(self, elevator: int, floor: int) -> None:
        pass
