"""
Shared fixtures for controller tests

FakeElevatorPort is a scriptable in-memory IElevatorPort that records every
command and can be told to fail on a given operation.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
import simpy

from controller.interfaces.elevator_port import IElevatorPort, ElevatorConnectionError
from controller.model.elevator import Direction, DoorStatus
from controller.supervisor import CycleSupervisor
from simulator.infrastructure.message_broker import MessageBroker


class FakeElevatorPort(IElevatorPort):
    """
    In-memory elevator port

    Attributes:
        elevators: Per-elevator dict of remote values
        hall_up / hall_down: Floors with lit hall buttons
        commands: Every set_* call as ('set_target'|'set_committed_direction', elevator, value)
        calls: Every operation name, in call order
        fail_on: Operation names that raise ElevatorConnectionError
        fail_after: Raise on any operation once this many calls were made
    """
    def __init__(self, num_floors=5, num_elevators=1, floor_height=3.0):
        self.num_floors = num_floors
        self.num_elevators = num_elevators
        self.floor_height = floor_height
        self.elevators = [self._default_elevator() for _ in range(num_elevators)]
        self.hall_up = set()
        self.hall_down = set()
        self.commands = []
        self.calls = []
        self.fail_on = set()
        self.fail_after = None
        self.connect_count = 0

    @staticmethod
    def _default_elevator():
        return {
            'direction': Direction.UNCOMMITTED,
            'target': 0,
            'accel': 0.0,
            'door': DoorStatus.OPEN,
            'floor': 0,
            'position': 0.0,
            'speed': 0.0,
            'weight': 0.0,
            'capacity': 8,
            'buttons': set(),
        }

    def set_elevator(self, index, **values):
        self.elevators[index].update(values)

    def _op(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise ElevatorConnectionError(name, "injected failure")
        if self.fail_after is not None and len(self.calls) > self.fail_after:
            raise ElevatorConnectionError(name, "injected failure")

    def connect(self):
        self._op("connect")
        self.connect_count += 1

    def get_floor_num(self):
        self._op("get_floor_num")
        return self.num_floors

    def get_elevator_num(self):
        self._op("get_elevator_num")
        return self.num_elevators

    def get_floor_height(self):
        self._op("get_floor_height")
        return self.floor_height

    def get_floor_button_up(self, floor):
        self._op("get_floor_button_up")
        return floor in self.hall_up

    def get_floor_button_down(self, floor):
        self._op("get_floor_button_down")
        return floor in self.hall_down

    def get_committed_direction(self, elevator):
        self._op("get_committed_direction")
        return self.elevators[elevator]['direction']

    def get_target(self, elevator):
        self._op("get_target")
        return self.elevators[elevator]['target']

    def get_elevator_accel(self, elevator):
        self._op("get_elevator_accel")
        return self.elevators[elevator]['accel']

    def get_elevator_door_status(self, elevator):
        self._op("get_elevator_door_status")
        return self.elevators[elevator]['door']

    def get_elevator_floor(self, elevator):
        self._op("get_elevator_floor")
        return self.elevators[elevator]['floor']

    def get_elevator_position(self, elevator):
        self._op("get_elevator_position")
        return self.elevators[elevator]['position']

    def get_elevator_speed(self, elevator):
        self._op("get_elevator_speed")
        return self.elevators[elevator]['speed']

    def get_elevator_weight(self, elevator):
        self._op("get_elevator_weight")
        return self.elevators[elevator]['weight']

    def get_elevator_capacity(self, elevator):
        self._op("get_elevator_capacity")
        return self.elevators[elevator]['capacity']

    def get_elevator_button(self, elevator, floor):
        self._op("get_elevator_button")
        return floor in self.elevators[elevator]['buttons']

    def set_committed_direction(self, elevator, direction):
        self._op("set_committed_direction")
        self.commands.append(("set_committed_direction", elevator, direction))
        # Behave like the remote side: the value is read back next cycle
        self.elevators[elevator]['direction'] = direction

    def set_target(self, elevator, floor):
        self._op("set_target")
        self.commands.append(("set_target", elevator, floor))
        self.elevators[elevator]['target'] = floor


class RecordingObserver:
    """IStateObserver-compatible collector of published snapshots"""
    def __init__(self):
        self.snapshots = []

    def on_state_changed(self, snapshot):
        self.snapshots.append(snapshot)


@pytest.fixture
def env():
    return simpy.Environment()


@pytest.fixture
def broker(env):
    return MessageBroker(env, log_messages=False)


@pytest.fixture
def port():
    return FakeElevatorPort(num_floors=5, num_elevators=1)


@pytest.fixture
def supervisor(port, broker):
    return CycleSupervisor(port, broker)


@pytest.fixture
def connected_supervisor(supervisor, port):
    """Supervisor after a successful initialize(), command log cleared"""
    assert supervisor.initialize()
    port.commands.clear()
    port.calls.clear()
    return supervisor


@pytest.fixture
def observer():
    return RecordingObserver()
