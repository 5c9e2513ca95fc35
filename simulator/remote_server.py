#!/usr/bin/env python3
"""
XML-RPC server exposing a SimulatedBuilding as a remote elevator endpoint

Method names follow the remote elevator interface (getFloorNum,
getElevatorButton, setCommittedDirection, ...). Directions and door states
travel as their integer wire values.
"""
import random
import sys
import threading
from xmlrpc.client import Fault
from xmlrpc.server import SimpleXMLRPCServer, SimpleXMLRPCRequestHandler

import simpy.rt

from .building_simulator import SimulatedBuilding


class _RequestHandler(SimpleXMLRPCRequestHandler):
    rpc_paths = ('/ElevatorSim', '/RPC2', '/')

    def log_message(self, format, *args):
        # No per-request access log
        pass


class ElevatorSimService:
    """Remote-callable facade; every method returns an XML-RPC marshallable value"""
    def __init__(self, building: SimulatedBuilding):
        self.building = building

    def _dispatch(self, method, params):
        """Route a call; every call fails while the building is offline"""
        func = None if method.startswith('_') else getattr(self, method, None)
        if not callable(func):
            raise Fault(1, f'method "{method}" is not supported')
        if not self.building.online:
            raise Fault(2, "simulated endpoint offline")
        return func(*params)

    def getFloorNum(self):
        return self.building.num_floors

    def getElevatorNum(self):
        return self.building.num_elevators

    def getFloorHeight(self):
        return float(self.building.floor_height)

    def getFloorButtonUp(self, floor):
        return self.building.is_hall_call_up(floor)

    def getFloorButtonDown(self, floor):
        return self.building.is_hall_call_down(floor)

    def getCommittedDirection(self, elevator):
        return int(self.building.get_elevator(elevator).committed_direction)

    def getTarget(self, elevator):
        return self.building.get_elevator(elevator).target

    def getElevatorAccel(self, elevator):
        return float(self.building.get_elevator(elevator).acceleration)

    def getElevatorDoorStatus(self, elevator):
        return int(self.building.get_elevator(elevator).door_status)

    def getElevatorFloor(self, elevator):
        return self.building.get_elevator(elevator).floor

    def getElevatorPosition(self, elevator):
        return float(self.building.get_elevator(elevator).position)

    def getElevatorSpeed(self, elevator):
        return float(abs(self.building.get_elevator(elevator).speed))

    def getElevatorWeight(self, elevator):
        return float(self.building.get_elevator(elevator).weight)

    def getElevatorCapacity(self, elevator):
        return self.building.get_elevator(elevator).capacity

    def getElevatorButton(self, elevator, floor):
        return floor in self.building.get_elevator(elevator).cab_buttons

    def setCommittedDirection(self, elevator, direction):
        self.building.set_committed_direction(elevator, direction)
        return True

    def setTarget(self, elevator, floor):
        self.building.set_target(elevator, floor)
        return True


class ElevatorSimServer:
    """
    Serves an ElevatorSimService on a background thread.

    The building itself keeps running in the caller's SimPy environment.
    """
    def __init__(self, building: SimulatedBuilding, host: str = 'localhost', port: int = 8000):
        self.building = building
        self.host = host
        self.port = port
        self._server = SimpleXMLRPCServer((host, port), requestHandler=_RequestHandler,
                                          logRequests=False, allow_none=True)
        self._server.register_introspection_functions()
        self._server.register_instance(ElevatorSimService(building))
        self._thread = None

    @property
    def url(self) -> str:
        # Port 0 asks the OS for a free port; report the one actually bound
        bound_port = self._server.server_address[1]
        return f"http://{self.host}:{bound_port}/ElevatorSim"

    def start(self):
        self._thread = threading.Thread(target=self._server.serve_forever,
                                        name="elevator-sim-xmlrpc", daemon=True)
        self._thread.start()
        print(f"Elevator simulator listening on {self.url}")

    def stop(self):
        self._server.shutdown()
        self._server.server_close()


def main():
    """Run a simulated building behind an XML-RPC endpoint until Ctrl+C"""
    from config import load_simulation_config, SimulationConfig

    sim_config = load_simulation_config(sys.argv[1]) if len(sys.argv) > 1 else SimulationConfig()

    env = simpy.rt.RealtimeEnvironment(factor=1.0, strict=False)
    building = SimulatedBuilding(
        env,
        num_floors=sim_config.building.num_floors,
        num_elevators=sim_config.building.num_elevators,
        floor_height=sim_config.building.floor_height,
        rated_speed=sim_config.elevator.rated_speed,
        door_time=sim_config.elevator.door_time,
        capacity=sim_config.elevator.capacity
    )
    building.start()
    if sim_config.traffic.call_rate > 0:
        rng = random.Random(sim_config.traffic.random_seed)
        env.process(building.generate_calls(sim_config.traffic.call_rate, rng))

    server = ElevatorSimServer(building, sim_config.server.host, sim_config.server.port)
    server.start()
    try:
        env.run()
    except KeyboardInterrupt:
        print("\nSimulator stopped.")
    finally:
        server.stop()


if __name__ == '__main__':
    main()
