"""
XML-RPC transport tests

XmlRpcElevatorPort against an ElevatorSimServer on a free local port.
"""

import xmlrpc.client

import pytest

from controller.interfaces.elevator_port import ElevatorConnectionError
from controller.model.elevator import Direction, DoorStatus
from controller.remote.xmlrpc_port import XmlRpcElevatorPort
from controller.supervisor import CycleSupervisor, ConnectionState
from controller.update_timer import UpdateTimer
from simulator.building_simulator import SimulatedBuilding
from simulator.remote_server import ElevatorSimServer, ElevatorSimService


@pytest.fixture
def sim_building(env):
    return SimulatedBuilding(env, num_floors=6, num_elevators=2, floor_height=3.2)


@pytest.fixture
def server(sim_building):
    sim_server = ElevatorSimServer(sim_building, host='127.0.0.1', port=0)
    sim_server.start()
    yield sim_server
    sim_server.stop()


@pytest.fixture
def remote_port(server):
    port = XmlRpcElevatorPort(server.url, timeout=2.0)
    port.connect()
    return port


def test_static_facts(remote_port):
    assert remote_port.get_floor_num() == 6
    assert remote_port.get_elevator_num() == 2
    assert remote_port.get_floor_height() == pytest.approx(3.2)


def test_enums_cross_the_wire(remote_port, sim_building):
    sim_building.get_elevator(1).door_status = DoorStatus.CLOSING

    remote_port.set_committed_direction(1, Direction.DOWN)

    assert sim_building.get_elevator(1).committed_direction == Direction.DOWN
    assert remote_port.get_committed_direction(1) is Direction.DOWN
    assert remote_port.get_elevator_door_status(1) is DoorStatus.CLOSING


def test_buttons_and_target(remote_port, sim_building):
    sim_building.press_hall_button(2, "UP")
    sim_building.press_car_button(0, 4)

    remote_port.set_target(0, 5)

    assert remote_port.get_floor_button_up(2) is True
    assert remote_port.get_floor_button_down(2) is False
    assert remote_port.get_elevator_button(0, 4) is True
    assert remote_port.get_elevator_button(0, 3) is False
    assert remote_port.get_target(0) == 5


def test_remote_fault_becomes_connection_error(remote_port):
    with pytest.raises(ElevatorConnectionError) as excinfo:
        remote_port.set_target(0, 99)
    assert excinfo.value.operation == "setTarget"


def test_call_before_connect_fails(server):
    port = XmlRpcElevatorPort(server.url)
    with pytest.raises(ElevatorConnectionError):
        port.get_floor_num()


def test_unreachable_endpoint(sim_building):
    sim_server = ElevatorSimServer(sim_building, host='127.0.0.1', port=0)
    url = sim_server.url
    sim_server.stop()

    port = XmlRpcElevatorPort(url, timeout=0.5)
    with pytest.raises(ElevatorConnectionError):
        port.connect()


def test_supervisor_over_xmlrpc(server, broker, sim_building):
    sim_building.get_elevator(0).floor = 2
    sim_building.get_elevator(0).target = 2
    supervisor = CycleSupervisor(XmlRpcElevatorPort(server.url), broker)

    assert supervisor.initialize() is True
    assert supervisor.connection_state == ConnectionState.CONNECTED
    assert supervisor.state.number_of_elevators == 2
    assert supervisor.state.elevators[0].current_floor == 2

    assert supervisor.set_manual_target(0, 5) is True
    assert sim_building.get_elevator(0).committed_direction == Direction.UP
    assert sim_building.get_elevator(0).target == 5


@pytest.mark.parametrize("method, bad_value", [
    ("getCommittedDirection", 7),
    ("getElevatorDoorStatus", 0),
    ("getTarget", None),
    ("getElevatorSpeed", "fast"),
])
def test_malformed_value_becomes_connection_error(monkeypatch, remote_port, method, bad_value):
    monkeypatch.setattr(ElevatorSimService, method, lambda self, *args: bad_value)
    getter = {
        "getCommittedDirection": remote_port.get_committed_direction,
        "getElevatorDoorStatus": remote_port.get_elevator_door_status,
        "getTarget": remote_port.get_target,
        "getElevatorSpeed": remote_port.get_elevator_speed,
    }[method]

    with pytest.raises(ElevatorConnectionError) as excinfo:
        getter(0)
    assert excinfo.value.operation == method


def test_malformed_direction_does_not_stop_the_controller(monkeypatch, env, broker, server):
    monkeypatch.setattr(ElevatorSimService, "getCommittedDirection", lambda self, elevator: 7)
    supervisor = CycleSupervisor(XmlRpcElevatorPort(server.url), broker)
    timer = UpdateTimer(env, supervisor, update_rate_ms=100)
    timer.start()

    env.run(until=1.0)

    assert timer.running
    assert timer.tick_count >= 10
    assert supervisor.connection_state == ConnectionState.DISCONNECTED


def test_offline_building_fails_every_remote_call(remote_port, sim_building):
    sim_building.set_online(False)

    with pytest.raises(ElevatorConnectionError):
        remote_port.connect()
    with pytest.raises(ElevatorConnectionError):
        remote_port.get_elevator_floor(0)
    with pytest.raises(ElevatorConnectionError):
        remote_port.set_target(0, 1)

    sim_building.set_online(True)
    remote_port.connect()
    assert remote_port.get_floor_num() == 6


def test_unknown_method_is_refused(server):
    proxy = xmlrpc.client.ServerProxy(server.url)
    with pytest.raises(xmlrpc.client.Fault):
        proxy._dispatch("getFloorNum", [])


def test_missing_method_is_refused(server):
    proxy = xmlrpc.client.ServerProxy(server.url)
    with pytest.raises(xmlrpc.client.Fault):
        proxy.openAllDoors()
