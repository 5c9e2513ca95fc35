"""
Cycle supervisor tests

Connection life cycle, the full cycle and the publish step.
"""

import pytest

from conftest import FakeElevatorPort
from controller.interfaces.elevator_port import ElevatorConnectionError
from controller.model.elevator import Direction, DoorStatus
from controller.supervisor import CycleSupervisor, ConnectionState
from simulator.infrastructure.message_broker import CONNECTION_TOPIC


# --- initialize() ---

def test_initialize_reads_static_facts_and_selects_first_elevator(supervisor, port):
    port.num_elevators = 3
    port.elevators = [port._default_elevator() for _ in range(3)]

    assert supervisor.initialize() is True

    state = supervisor.state
    assert supervisor.connection_state == ConnectionState.CONNECTED
    assert state.number_of_floors == 5
    assert state.number_of_elevators == 3
    assert state.floor_height == 3.0
    assert len(state.elevators) == 3
    assert state.selected_elevator == 0
    assert port.calls.count("get_floor_num") == 1


def test_initialize_runs_one_cycle(supervisor, port, observer):
    port.hall_up = {2}
    supervisor.add_observer(observer)

    supervisor.initialize()

    assert supervisor.cycle_count == 1
    assert len(observer.snapshots) == 1
    assert observer.snapshots[0].floor_buttons_up == frozenset({2})


def test_initialize_without_endpoint_stays_disconnected(supervisor, port):
    port.fail_on = {"get_floor_num"}

    result = supervisor.initialize()

    assert result is False
    assert supervisor.connection_state == ConnectionState.DISCONNECTED
    assert supervisor.state.number_of_elevators == 0


def test_update_while_disconnected_retries_initialize(supervisor, port):
    port.fail_on = {"get_floor_num"}
    supervisor.initialize()

    port.fail_on = set()
    supervisor.update()

    assert supervisor.connection_state == ConnectionState.CONNECTED
    assert supervisor.state.number_of_elevators == 1
    assert port.connect_count == 2


def test_invalid_building_is_treated_as_unavailable(supervisor, port):
    port.floor_height = 0.0
    assert supervisor.initialize() is False
    assert supervisor.connection_state == ConnectionState.DISCONNECTED


def test_failed_first_cycle_leaves_disconnected(supervisor, port):
    port.fail_on = {"get_elevator_weight"}
    assert supervisor.initialize() is False
    assert supervisor.connection_state == ConnectionState.DISCONNECTED


# --- update() ---

def test_scenario_automatic_up_at_floor_two(port, broker):
    """floors=5, elevator at floor 2, doors open, standing, automatic, UP -> target 3"""
    supervisor = CycleSupervisor(port, broker, default_automatic=True)
    port.set_elevator(0, floor=2, target=2, direction=Direction.UP,
                      door=DoorStatus.OPEN, speed=0.0)

    supervisor.initialize()
    port.commands.clear()
    supervisor.update()

    assert port.commands == [("set_target", 0, 3)]


def test_scenario_automatic_up_at_top_floor(port, broker):
    supervisor = CycleSupervisor(port, broker, default_automatic=True)
    port.set_elevator(0, floor=4, target=4, direction=Direction.UP,
                      door=DoorStatus.OPEN, speed=0.0)

    supervisor.initialize()

    assert port.commands == [("set_committed_direction", 0, Direction.UNCOMMITTED)]
    assert all(command[0] != "set_target" for command in port.commands)


def test_update_publishes_once_per_cycle(connected_supervisor, observer):
    connected_supervisor.add_observer(observer)
    connected_supervisor.update()
    connected_supervisor.update()
    assert len(observer.snapshots) == 2


def test_published_snapshot_is_not_the_live_state(connected_supervisor, observer, port):
    connected_supervisor.add_observer(observer)
    port.hall_down = {1}
    connected_supervisor.update()
    snapshot = observer.snapshots[-1]

    port.hall_down = {3}
    connected_supervisor.update()

    assert snapshot.floor_buttons_down == frozenset({1})
    assert connected_supervisor.state.floor_buttons_down == {3}


def test_connection_loss_mid_cycle_reconnects_immediately(connected_supervisor, port):
    port.fail_on = {"get_elevator_floor"}
    connects_before = port.connect_count

    connected_supervisor.update()

    # Retry inside the same update also failed on its first cycle
    assert connected_supervisor.connection_state == ConnectionState.DISCONNECTED
    assert port.connect_count == connects_before + 1


def test_transient_failure_heals_within_the_same_update(connected_supervisor, port, observer):
    connected_supervisor.add_observer(observer)
    original = port.get_elevator_speed
    failures = {"remaining": 1}

    def flaky_speed(elevator):
        if failures["remaining"]:
            failures["remaining"] -= 1
            port.calls.append("get_elevator_speed")
            raise ElevatorConnectionError("get_elevator_speed", "timeout")
        return original(elevator)

    port.get_elevator_speed = flaky_speed
    connected_supervisor.update()

    assert connected_supervisor.connection_state == ConnectionState.CONNECTED
    assert len(observer.snapshots) == 1


def test_connection_errors_never_escape_update(supervisor, port):
    port.fail_on = {"connect"}
    for _ in range(3):
        supervisor.update()
    assert supervisor.connection_state == ConnectionState.DISCONNECTED


def test_programming_errors_are_not_swallowed(connected_supervisor, port):
    def broken(elevator):
        raise KeyError("boom")

    port.get_target = broken
    with pytest.raises(KeyError):
        connected_supervisor.update()


def test_connection_transitions_are_published(supervisor, broker, port):
    transitions = []
    broker.subscribe(CONNECTION_TOPIC, lambda message: transitions.append(message['new_state']))

    supervisor.initialize()
    port.fail_on = {"connect", "get_target"}
    supervisor.update()

    assert transitions == ["CONNECTING", "CONNECTED", "DISCONNECTED", "CONNECTING", "DISCONNECTED"]


def test_removed_observer_gets_nothing(connected_supervisor, observer):
    connected_supervisor.add_observer(observer)
    connected_supervisor.remove_observer(observer)
    connected_supervisor.update()
    assert observer.snapshots == []


# --- Reconnect policy ---

def _drop_and_reconnect(supervisor, port):
    port.fail_on = {"get_target", "connect"}
    supervisor.update()
    assert supervisor.connection_state == ConnectionState.DISCONNECTED
    port.fail_on = set()
    supervisor.update()
    assert supervisor.connection_state == ConnectionState.CONNECTED


def test_reconnect_preserves_modes_and_selection(broker):
    port = FakeElevatorPort(num_floors=5, num_elevators=2)
    supervisor = CycleSupervisor(port, broker, preserve_modes_on_reconnect=True)
    supervisor.initialize()
    supervisor.set_automatic_mode(1, True)
    supervisor.select_elevator(1)
    old_entities = list(supervisor.state.elevators)

    _drop_and_reconnect(supervisor, port)

    state = supervisor.state
    assert [e.automatic for e in state.elevators] == [False, True]
    assert state.selected_elevator == 1
    # Fresh session: new entity objects
    assert all(new is not old for new, old in zip(state.elevators, old_entities))


def test_reconnect_resets_session_when_disabled(broker):
    port = FakeElevatorPort(num_floors=5, num_elevators=2)
    supervisor = CycleSupervisor(port, broker, preserve_modes_on_reconnect=False)
    supervisor.initialize()
    supervisor.set_automatic_mode(1, True)
    supervisor.select_elevator(1)

    _drop_and_reconnect(supervisor, port)

    assert [e.automatic for e in supervisor.state.elevators] == [False, False]
    assert supervisor.state.selected_elevator == 0


def test_reconnect_to_different_installation_resets_session(broker):
    port = FakeElevatorPort(num_floors=5, num_elevators=2)
    supervisor = CycleSupervisor(port, broker)
    supervisor.initialize()
    supervisor.set_automatic_mode(0, True)

    port.fail_on = {"get_target", "connect"}
    supervisor.update()
    port.fail_on = set()
    port.num_elevators = 3
    port.elevators = [port._default_elevator() for _ in range(3)]
    supervisor.update()

    assert supervisor.state.number_of_elevators == 3
    assert not any(e.automatic for e in supervisor.state.elevators)
