"""
XML-RPC client for a remote elevator endpoint

Every transport failure (socket errors, HTTP errors, remote faults) and every
value that cannot be decoded is reported as ElevatorConnectionError.
"""

import http.client
import socket
import xmlrpc.client

from ..interfaces.elevator_port import IElevatorPort, ElevatorConnectionError
from ..model.elevator import Direction, DoorStatus


class _TimeoutTransport(xmlrpc.client.Transport):
    """Transport with a socket timeout, so a dead endpoint cannot block a cycle"""
    def __init__(self, timeout: float):
        super().__init__()
        self.timeout = timeout

    def make_connection(self, host):
        connection = super().make_connection(host)
        connection.timeout = self.timeout
        return connection


class XmlRpcElevatorPort(IElevatorPort):
    """
    IElevatorPort talking to an XML-RPC elevator endpoint

    Args:
        url: Endpoint URL, e.g. 'http://localhost:8000/ElevatorSim'
        timeout: Socket timeout per call in seconds
    """
    TRANSPORT_ERRORS = (OSError, socket.timeout, http.client.HTTPException,
                        xmlrpc.client.Fault, xmlrpc.client.ProtocolError)

    def __init__(self, url: str = "http://localhost:8000/ElevatorSim", timeout: float = 2.0):
        self.url = url
        self.timeout = timeout
        self._proxy = None

    def connect(self) -> None:
        """Create a fresh proxy and verify the endpoint answers"""
        try:
            self._proxy = xmlrpc.client.ServerProxy(
                self.url, transport=_TimeoutTransport(self.timeout), allow_none=True
            )
        except OSError as e:
            raise ElevatorConnectionError("connect", e) from e
        self._call("getElevatorNum")

    def _call(self, method: str, *args):
        if self._proxy is None:
            raise ElevatorConnectionError(method, "not connected")
        try:
            return getattr(self._proxy, method)(*args)
        except self.TRANSPORT_ERRORS as e:
            raise ElevatorConnectionError(method, e) from e

    def _read(self, convert, method: str, *args):
        """Call a getter and decode its value; a malformed value counts as a broken link"""
        value = self._call(method, *args)
        try:
            return convert(value)
        except (TypeError, ValueError) as e:
            raise ElevatorConnectionError(method, f"malformed value {value!r}: {e}") from e

    def get_floor_num(self) -> int:
        return self._read(int, "getFloorNum")

    def get_elevator_num(self) -> int:
        return self._read(int, "getElevatorNum")

    def get_floor_height(self) -> float:
        return self._read(float, "getFloorHeight")

    def get_floor_button_up(self, floor: int) -> bool:
        return self._read(bool, "getFloorButtonUp", floor)

    def get_floor_button_down(self, floor: int) -> bool:
        return self._read(bool, "getFloorButtonDown", floor)

    def get_committed_direction(self, elevator: int) -> Direction:
        return self._read(Direction, "getCommittedDirection", elevator)

    def get_target(self, elevator: int) -> int:
        return self._read(int, "getTarget", elevator)

    def get_elevator_accel(self, elevator: int) -> float:
        return self._read(float, "getElevatorAccel", elevator)

    def get_elevator_door_status(self, elevator: int) -> DoorStatus:
        return self._read(DoorStatus, "getElevatorDoorStatus", elevator)

    def get_elevator_floor(self, elevator: int) -> int:
        return self._read(int, "getElevatorFloor", elevator)

    def get_elevator_position(self, elevator: int) -> float:
        return self._read(float, "getElevatorPosition", elevator)

    def get_elevator_speed(self, elevator: int) -> float:
        return self._read(float, "getElevatorSpeed", elevator)

    def get_elevator_weight(self, elevator: int) -> float:
        return self._read(float, "getElevatorWeight", elevator)

    def get_elevator_capacity(self, elevator: int) -> int:
        return self._read(int, "getElevatorCapacity", elevator)

    def get_elevator_button(self, elevator: int, floor: int) -> bool:
        return self._read(bool, "getElevatorButton", elevator, floor)

    def set_committed_direction(self, elevator: int, direction: Direction) -> None:
        self._call("setCommittedDirection", elevator, int(direction))

    def set_target(self, elevator: int, floor: int) -> None:
        self._call("setTarget", elevator, floor)
