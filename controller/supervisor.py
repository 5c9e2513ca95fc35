from enum import Enum

from simulator.infrastructure.message_broker import MessageBroker, STATE_TOPIC, CONNECTION_TOPIC
from .interfaces.elevator_port import IElevatorPort, ElevatorConnectionError
from .interfaces.state_observer import IStateObserver
from .model.building import BuildingState, BuildingSnapshot
from .model.elevator import Direction
from .synchronizer import StateSynchronizer
from .dispatch import DispatchEngine


class ConnectionState(Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class CycleSupervisor:
    """
    Owns the BuildingState and runs the control cycle against a remote elevator system

    One cycle: synchronize every floor and elevator, dispatch every elevator,
    publish a snapshot. The supervisor is driven by an external fixed-cadence
    timer and must never run two cycles at once; the manual command entry
    points must be called from the same thread.

    Connectivity failures never escape: they move the supervisor to
    DISCONNECTED, and the next update() (or the immediate retry inside the
    failing update()) reconnects.

    Architecture: observers never see the mutable BuildingState. All
    notifications go through the MessageBroker as immutable snapshots
    (topic 'ecc/state'); connection state changes go to 'ecc/connection'.
    """
    def __init__(self, port: IElevatorPort, broker: MessageBroker,
                 preserve_modes_on_reconnect: bool = True,
                 default_automatic: bool = False):
        """
        Args:
            port: Remote elevator system
            broker: Message broker used for publishing
            preserve_modes_on_reconnect: Carry automatic flags and selection
                over a reconnect when the elevator count is unchanged
            default_automatic: Mode of elevators in a fresh session
        """
        self.port = port
        self.broker = broker
        self.preserve_modes_on_reconnect = preserve_modes_on_reconnect
        self.default_automatic = default_automatic

        self._state = BuildingState()
        self._connection_state = ConnectionState.DISCONNECTED
        self.synchronizer = StateSynchronizer(port, self._state)
        self.dispatcher = DispatchEngine(port, self._state, broker)
        self.cycle_count = 0
        self._observer_callbacks = {}

    @property
    def state(self) -> BuildingState:
        return self._state

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    @property
    def is_connected(self) -> bool:
        return self._connection_state == ConnectionState.CONNECTED

    # --- Observers ---

    def add_observer(self, observer: IStateObserver):
        """Deliver every published snapshot to observer.on_state_changed()"""
        if observer in self._observer_callbacks:
            return
        callback = observer.on_state_changed
        self._observer_callbacks[observer] = callback
        self.broker.subscribe(STATE_TOPIC, callback)

    def remove_observer(self, observer: IStateObserver):
        callback = self._observer_callbacks.pop(observer, None)
        if callback is not None:
            self.broker.unsubscribe(STATE_TOPIC, callback)

    def publish(self) -> BuildingSnapshot:
        """Hand an immutable snapshot of the current state to all observers"""
        snapshot = self._state.snapshot()
        self.broker.put(STATE_TOPIC, snapshot)
        return snapshot

    # --- Cycle ---

    def initialize(self) -> bool:
        """
        Connect to the remote system and start a fresh session.

        The static facts are queried once, a new BuildingState is allocated
        and one full cycle is run. The previous state is only replaced after
        the static facts were read successfully.

        Returns:
            True if connected afterward, False if the remote system is not
            available yet (retried on the next update)
        """
        self._set_connection_state(ConnectionState.CONNECTING)
        try:
            self.port.connect()
            number_of_floors = self.port.get_floor_num()
            number_of_elevators = self.port.get_elevator_num()
            floor_height = self.port.get_floor_height()
        except ElevatorConnectionError as e:
            self._log(f"Remote elevator system not available: {e}")
            self._set_connection_state(ConnectionState.DISCONNECTED)
            return False

        try:
            fresh = BuildingState(
                number_of_floors=number_of_floors,
                number_of_elevators=number_of_elevators,
                floor_height=floor_height
            )
        except ValueError as e:
            self._log(f"Remote elevator system reported an invalid building: {e}")
            self._set_connection_state(ConnectionState.DISCONNECTED)
            return False

        previous = self._state
        self._state = fresh
        for elevator in self._state.elevators:
            elevator.automatic = self.default_automatic
        if self.preserve_modes_on_reconnect:
            self._carry_over_session(previous, self._state)

        self.synchronizer = StateSynchronizer(self.port, self._state)
        self.dispatcher = DispatchEngine(self.port, self._state, self.broker)
        self._log(f"Connected: {number_of_floors} floors, {number_of_elevators} elevators, "
                  f"floor height {floor_height:.2f} m")
        self._set_connection_state(ConnectionState.CONNECTED)

        try:
            self._run_cycle()
        except ElevatorConnectionError as e:
            self._log(f"First cycle failed: {e}")
            self._set_connection_state(ConnectionState.DISCONNECTED)
            return False
        return True

    def update(self):
        """
        Run one control cycle. Called by the timer at a fixed cadence.

        Reconnects instead of cycling while disconnected. A cycle that fails
        with a connectivity error is followed by one immediate reconnect
        attempt.
        """
        if not self.is_connected:
            self.initialize()
            return

        try:
            self._run_cycle()
        except ElevatorConnectionError as e:
            self._log(f"Connection lost during cycle: {e}")
            self._set_connection_state(ConnectionState.DISCONNECTED)
            self.initialize()

    def _run_cycle(self):
        self.synchronizer.refresh_all()
        self.dispatcher.dispatch_all()
        self.cycle_count += 1
        self.publish()

    def _carry_over_session(self, previous: BuildingState, fresh: BuildingState):
        """Keep operator choices over a reconnect to the same installation"""
        if previous.number_of_elevators != fresh.number_of_elevators:
            return
        for old, new in zip(previous.elevators, fresh.elevators):
            new.automatic = old.automatic
        if previous.selected_elevator is not None:
            fresh.selected_elevator = previous.selected_elevator

    def _set_connection_state(self, new_state: ConnectionState):
        if self._connection_state != new_state:
            old_state = self._connection_state
            self._connection_state = new_state
            self._log(f"Connection state: {old_state.value} -> {new_state.value}")
            self.broker.put(CONNECTION_TOPIC, {
                'timestamp': self.broker.get_current_time(),
                'old_state': old_state.value,
                'new_state': new_state.value
            })

    # --- Manual command entry points ---

    def select_elevator(self, index: int) -> bool:
        """
        Select the elevator shown to the operator

        Returns:
            True if the selection was changed and published
        """
        if not self._state.is_valid_elevator(index):
            return False
        self._state.selected_elevator = index
        self.publish()
        return True

    def set_automatic_mode(self, index: int, enabled: bool) -> bool:
        """
        Switch an elevator between automatic and manual operation.

        The sweep policy takes over on the next cycle.

        Returns:
            True if the mode was set and published
        """
        if not self._state.is_valid_elevator(index):
            return False
        self._state.elevators[index].automatic = bool(enabled)
        self._log(f"Elevator {index} mode: {'AUTOMATIC' if enabled else 'MANUAL'}")
        self.publish()
        return True

    def set_manual_target(self, index: int, target_floor: int) -> bool:
        """
        Send a manually operated elevator to a floor.

        The committed direction is always set before the target. Nothing is
        sent if the elevator is already at the target floor.

        Args:
            index: Elevator index
            target_floor: Destination floor

        Returns:
            True if commands were sent to the remote system
        """
        if not self.is_connected:
            return False
        if not self._state.is_valid_elevator(index) or not self._state.is_valid_floor(target_floor):
            return False

        elevator = self._state.elevators[index]
        if elevator.automatic:
            # Not possible to set a manual target in automatic mode
            return False

        if target_floor < elevator.current_floor:
            direction = Direction.DOWN
        elif target_floor > elevator.current_floor:
            direction = Direction.UP
        else:
            return False

        try:
            self.port.set_committed_direction(index, direction)
            self.port.set_target(index, target_floor)
        except ElevatorConnectionError as e:
            self._log(f"Manual target for elevator {index} failed: {e}")
            self._set_connection_state(ConnectionState.DISCONNECTED)
            return False

        self._log(f"Elevator {index} sent to floor {target_floor} ({direction.name})")
        return True

    def _log(self, text: str):
        print(f"{self.broker.get_current_time():.2f} [ECC] {text}")
