from typing import Optional

from simulator.infrastructure.message_broker import MessageBroker
from .interfaces.elevator_port import IElevatorPort
from .model.building import BuildingState
from .model.elevator import ElevatorState, Direction


class DispatchEngine:
    """
    Per-elevator decision procedure, run once per elevator per cycle

    Automatic elevators follow the sweep policy: stop at every floor on the
    way up, reverse at the top floor, stop at every floor on the way down,
    reverse at the bottom. Manual elevators only get the manual-assist
    transition (release the committed direction once parked at the target).

    Commands are only issued while the elevator stands at a floor with the
    doors open, so the remote side sees at most one target change per stop.
    """
    def __init__(self, port: IElevatorPort, state: BuildingState,
                 broker: Optional[MessageBroker] = None):
        self.port = port
        self.state = state
        self.broker = broker

    def dispatch_all(self):
        """Run the decision for every elevator in index order"""
        for index in range(self.state.number_of_elevators):
            self.dispatch(index)

    def dispatch(self, index: int):
        elevator = self.state.get_elevator(index)
        if elevator.automatic:
            self.auto_operate(index, elevator)
        else:
            self.manual_assist(index, elevator)

    def auto_operate(self, index: int, elevator: ElevatorState):
        """
        One step of the sweep state machine.

        The committed direction is the state variable; it is read back from
        the remote side on the next cycle, so nothing is stored locally.
        """
        top_floor = self.state.top_floor
        floor = elevator.current_floor
        direction = elevator.committed_direction

        if direction == Direction.UP:
            if not elevator.is_parked():
                return
            if floor < top_floor:
                self.port.set_target(index, floor + 1)
            else:
                self._log(f"Elevator {index} reached top floor {floor}, releasing direction")
                self.port.set_committed_direction(index, Direction.UNCOMMITTED)

        elif direction == Direction.DOWN:
            if not elevator.is_parked():
                return
            if floor > 0:
                self.port.set_target(index, floor - 1)
            else:
                self._log(f"Elevator {index} reached bottom floor, releasing direction")
                self.port.set_committed_direction(index, Direction.UNCOMMITTED)

        elif direction == Direction.UNCOMMITTED:
            new_direction = Direction.UP if floor < top_floor else Direction.DOWN
            self._log(f"Elevator {index} at floor {floor}: committing {new_direction.name}")
            self.port.set_committed_direction(index, new_direction)

    def manual_assist(self, index: int, elevator: ElevatorState):
        """Release a manually driven elevator once it has arrived at its target"""
        if elevator.has_arrived():
            self.port.set_committed_direction(index, Direction.UNCOMMITTED)

    def _log(self, text: str):
        if self.broker is not None:
            print(f"{self.broker.get_current_time():.2f} [Dispatch] {text}")
