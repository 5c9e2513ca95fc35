from .interfaces.elevator_port import IElevatorPort
from .model.building import BuildingState
from .model.elevator import Direction, DoorStatus


class StateSynchronizer:
    """
    Copies the dynamic state of the remote elevator system into a BuildingState

    Every floor is probed on every cycle; the remote side is the only source
    of truth and offers no cheaper query. ElevatorConnectionError raised by
    the port is never caught here: it aborts the refresh and propagates to
    the CycleSupervisor.
    """
    def __init__(self, port: IElevatorPort, state: BuildingState):
        self.port = port
        self.state = state

    def refresh_all(self):
        """Refresh hall buttons, then every elevator in index order"""
        self.refresh_call_buttons()
        for index in range(self.state.number_of_elevators):
            self.refresh_elevator(index)

    def refresh_call_buttons(self):
        """
        Rebuild the sets of lit hall buttons.

        Both sets are built first and swapped in afterward, so a failed read
        leaves the previous sets untouched.
        """
        buttons_up = set()
        buttons_down = set()

        for floor in range(self.state.number_of_floors):
            if self.port.get_floor_button_up(floor):
                buttons_up.add(floor)
            if self.port.get_floor_button_down(floor):
                buttons_down.add(floor)

        self.state.floor_buttons_up = buttons_up
        self.state.floor_buttons_down = buttons_down

    def refresh_elevator(self, index: int):
        """
        Update the elevator at `index` in place (the entity object is kept).

        Args:
            index: Elevator index
        """
        port = self.port
        elevator = self.state.get_elevator(index)

        committed_direction = Direction(port.get_committed_direction(index))
        target = port.get_target(index)
        acceleration = port.get_elevator_accel(index)
        door_status = DoorStatus(port.get_elevator_door_status(index))
        floor = port.get_elevator_floor(index)
        position = port.get_elevator_position(index)
        speed = port.get_elevator_speed(index)
        weight = port.get_elevator_weight(index)
        capacity = port.get_elevator_capacity(index)

        # Cab panel: one probe per floor
        active_buttons = {
            f for f in range(self.state.number_of_floors)
            if port.get_elevator_button(index, f)
        }

        elevator.committed_direction = committed_direction
        elevator.current_target = target
        elevator.current_acceleration = acceleration
        elevator.door_status = door_status
        elevator.current_floor = floor
        elevator.current_height_over_ground = position
        elevator.current_speed = speed
        elevator.current_passenger_weight = weight
        elevator.max_passenger_number = capacity
        elevator.active_floor_buttons = active_buttons
