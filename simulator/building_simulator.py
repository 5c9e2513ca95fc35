"""
Building Simulator - A small in-process elevator installation

This module provides:
- SimulatedBuilding: elevators with doors and constant-speed travel, hall and
  cab buttons, advanced by a SimPy process
- SimulatedElevatorPort: IElevatorPort implementation on top of it, with an
  on/off switch to simulate connection loss

The model is intentionally simple (no jerk-limited profiles, no passengers).
It only has to behave like a remote elevator system from the controller's
point of view: doors cycle OPENING -> OPEN -> CLOSING -> CLOSED, the car
travels to its target and opens the doors on arrival.
"""

import math
import random
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Set

import simpy

from controller.interfaces.elevator_port import IElevatorPort, ElevatorConnectionError
from controller.model.elevator import Direction, DoorStatus


@dataclass
class SimulatedElevator:
    """State of one simulated car"""
    index: int
    capacity: int = 10
    floor: int = 0
    target: int = 0
    position: float = 0.0  # meters over ground
    speed: float = 0.0  # m/s, signed in travel direction
    acceleration: float = 0.0
    weight: float = 0.0  # kg
    committed_direction: Direction = Direction.UNCOMMITTED
    door_status: DoorStatus = DoorStatus.OPEN
    door_timer: float = 0.0
    cab_buttons: Set[int] = field(default_factory=set)


class SimulatedBuilding:
    """
    Simulated elevator installation driven by a SimPy process

    All public methods take a lock, so the building can be served over the
    network from another thread while the SimPy process advances it.
    """
    def __init__(self, env: simpy.Environment, num_floors: int, num_elevators: int,
                 floor_height: float = 3.5, rated_speed: float = 2.5,
                 door_time: float = 1.0, capacity: int = 10, step_time: float = 0.1):
        """
        Args:
            env: SimPy environment (time unit: seconds)
            num_floors: Number of floors (0 .. num_floors - 1)
            num_elevators: Number of elevators
            floor_height: Floor height in meters
            rated_speed: Travel speed in m/s
            door_time: Duration of one door opening or closing in seconds
            capacity: Capacity of each car in persons
            step_time: Physics step of the SimPy process in seconds
        """
        if num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        if num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")
        if floor_height <= 0 or rated_speed <= 0 or door_time <= 0 or step_time <= 0:
            raise ValueError("floor_height, rated_speed, door_time and step_time must be positive")

        self.env = env
        self.num_floors = num_floors
        self.floor_height = floor_height
        self.rated_speed = rated_speed
        self.door_time = door_time
        self.step_time = step_time
        self.elevators: List[SimulatedElevator] = [
            SimulatedElevator(index=i, capacity=capacity) for i in range(num_elevators)
        ]
        self.hall_calls_up: Set[int] = set()
        self.hall_calls_down: Set[int] = set()
        self.online = True
        self._lock = threading.RLock()
        self._process = None

    @property
    def num_elevators(self) -> int:
        return len(self.elevators)

    def start(self) -> simpy.Process:
        if self._process is None:
            self._process = self.env.process(self.run())
        return self._process

    def run(self):
        """SimPy process: advance the physics every step_time seconds"""
        while True:
            yield self.env.timeout(self.step_time)
            self.step(self.step_time)

    # --- Physics ---

    def step(self, dt: float):
        """Advance every car by dt seconds"""
        with self._lock:
            for elevator in self.elevators:
                self._step_elevator(elevator, dt)

    def _step_elevator(self, elevator: SimulatedElevator, dt: float):
        if elevator.door_status == DoorStatus.OPENING:
            elevator.door_timer -= dt
            if elevator.door_timer <= 0:
                elevator.door_status = DoorStatus.OPEN
                self._serve_floor(elevator)

        elif elevator.door_status == DoorStatus.OPEN:
            if elevator.target != elevator.floor:
                elevator.door_status = DoorStatus.CLOSING
                elevator.door_timer = self.door_time

        elif elevator.door_status == DoorStatus.CLOSING:
            elevator.door_timer -= dt
            if elevator.door_timer <= 0:
                elevator.door_status = DoorStatus.CLOSED

        elif elevator.door_status == DoorStatus.CLOSED:
            if elevator.target == elevator.floor and elevator.speed == 0:
                self._open_doors(elevator)
            else:
                self._travel(elevator, dt)

    def _travel(self, elevator: SimulatedElevator, dt: float):
        target_height = elevator.target * self.floor_height
        distance = target_height - elevator.position
        step = self.rated_speed * dt

        if abs(distance) <= step:
            # Arrival
            elevator.position = target_height
            elevator.floor = elevator.target
            elevator.speed = 0.0
            self._open_doors(elevator)
            return

        sign = 1 if distance > 0 else -1
        elevator.position += sign * step
        elevator.speed = sign * self.rated_speed
        # Floor passed most recently in the direction of travel
        level = elevator.position / self.floor_height
        if sign > 0:
            elevator.floor = math.floor(level + 1e-9)
        else:
            elevator.floor = math.ceil(level - 1e-9)

    def _open_doors(self, elevator: SimulatedElevator):
        elevator.door_status = DoorStatus.OPENING
        elevator.door_timer = self.door_time

    def _serve_floor(self, elevator: SimulatedElevator):
        """Clear the buttons answered by a car opening its doors"""
        floor = elevator.floor
        elevator.cab_buttons.discard(floor)
        if elevator.committed_direction != Direction.DOWN:
            self.hall_calls_up.discard(floor)
        if elevator.committed_direction != Direction.UP:
            self.hall_calls_down.discard(floor)

    # --- Passenger side ---

    def press_hall_button(self, floor: int, direction: str):
        """
        Args:
            floor: Floor of the button
            direction: 'UP' or 'DOWN'
        """
        self._check_floor(floor)
        with self._lock:
            if direction == "UP":
                self.hall_calls_up.add(floor)
            elif direction == "DOWN":
                self.hall_calls_down.add(floor)
            else:
                raise ValueError(f"Invalid direction '{direction}'. Must be 'UP' or 'DOWN'")
        print(f"{self.env.now:.2f} [Building] Hall button pressed at floor {floor} ({direction})")

    def press_car_button(self, elevator: int, floor: int):
        self._check_floor(floor)
        with self._lock:
            self._get(elevator).cab_buttons.add(floor)
        print(f"{self.env.now:.2f} [Building] Car button {floor} pressed in elevator {elevator}")

    def generate_calls(self, call_rate: float, rng: Optional[random.Random] = None):
        """
        SimPy process pressing random buttons

        Args:
            call_rate: Average number of button presses per second
            rng: Random generator (seeded for reproducible runs)
        """
        rng = rng or random.Random()
        while True:
            yield self.env.timeout(rng.expovariate(call_rate))
            floor = rng.randrange(self.num_floors)
            choice = rng.random()
            if choice < 0.5:
                self.press_car_button(rng.randrange(self.num_elevators), floor)
            elif floor < self.num_floors - 1 and (choice < 0.75 or floor == 0):
                self.press_hall_button(floor, "UP")
            elif floor > 0:
                self.press_hall_button(floor, "DOWN")

    # --- Remote-side accessors ---

    def set_online(self, online: bool):
        """Simulate the remote endpoint going away (False) or coming back (True)"""
        with self._lock:
            self.online = online
        print(f"{self.env.now:.2f} [Building] Endpoint {'ONLINE' if online else 'OFFLINE'}")

    def set_target(self, elevator: int, floor: int):
        self._check_floor(floor)
        with self._lock:
            self._get(elevator).target = floor

    def set_committed_direction(self, elevator: int, direction: Direction):
        with self._lock:
            self._get(elevator).committed_direction = Direction(direction)

    def get_elevator(self, elevator: int) -> SimulatedElevator:
        with self._lock:
            return self._get(elevator)

    def is_hall_call_up(self, floor: int) -> bool:
        self._check_floor(floor)
        with self._lock:
            return floor in self.hall_calls_up

    def is_hall_call_down(self, floor: int) -> bool:
        self._check_floor(floor)
        with self._lock:
            return floor in self.hall_calls_down

    def _get(self, elevator: int) -> SimulatedElevator:
        if not 0 <= elevator < len(self.elevators):
            raise IndexError(f"Invalid elevator index: {elevator}")
        return self.elevators[elevator]

    def _check_floor(self, floor: int):
        if not 0 <= floor < self.num_floors:
            raise IndexError(f"Invalid floor: {floor}")


class SimulatedElevatorPort(IElevatorPort):
    """
    IElevatorPort backed by a SimulatedBuilding in the same process

    While the building is offline every call raises ElevatorConnectionError.
    """
    def __init__(self, building: SimulatedBuilding):
        self.building = building

    def _require_online(self, operation: str):
        if not self.building.online:
            raise ElevatorConnectionError(operation, "simulated endpoint offline")

    def connect(self) -> None:
        self._require_online("connect")

    def get_floor_num(self) -> int:
        self._require_online("get_floor_num")
        return self.building.num_floors

    def get_elevator_num(self) -> int:
        self._require_online("get_elevator_num")
        return self.building.num_elevators

    def get_floor_height(self) -> float:
        self._require_online("get_floor_height")
        return self.building.floor_height

    def get_floor_button_up(self, floor: int) -> bool:
        self._require_online("get_floor_button_up")
        return self.building.is_hall_call_up(floor)

    def get_floor_button_down(self, floor: int) -> bool:
        self._require_online("get_floor_button_down")
        return self.building.is_hall_call_down(floor)

    def get_committed_direction(self, elevator: int) -> Direction:
        self._require_online("get_committed_direction")
        return self.building.get_elevator(elevator).committed_direction

    def get_target(self, elevator: int) -> int:
        self._require_online("get_target")
        return self.building.get_elevator(elevator).target

    def get_elevator_accel(self, elevator: int) -> float:
        self._require_online("get_elevator_accel")
        return self.building.get_elevator(elevator).acceleration

    def get_elevator_door_status(self, elevator: int) -> DoorStatus:
        self._require_online("get_elevator_door_status")
        return self.building.get_elevator(elevator).door_status

    def get_elevator_floor(self, elevator: int) -> int:
        self._require_online("get_elevator_floor")
        return self.building.get_elevator(elevator).floor

    def get_elevator_position(self, elevator: int) -> float:
        self._require_online("get_elevator_position")
        return self.building.get_elevator(elevator).position

    def get_elevator_speed(self, elevator: int) -> float:
        self._require_online("get_elevator_speed")
        return abs(self.building.get_elevator(elevator).speed)

    def get_elevator_weight(self, elevator: int) -> float:
        self._require_online("get_elevator_weight")
        return self.building.get_elevator(elevator).weight

    def get_elevator_capacity(self, elevator: int) -> int:
        self._require_online("get_elevator_capacity")
        return self.building.get_elevator(elevator).capacity

    def get_elevator_button(self, elevator: int, floor: int) -> bool:
        self._require_online("get_elevator_button")
        return floor in self.building.get_elevator(elevator).cab_buttons

    def set_committed_direction(self, elevator: int, direction: Direction) -> None:
        self._require_online("set_committed_direction")
        self.building.set_committed_direction(elevator, direction)

    def set_target(self, elevator: int, floor: int) -> None:
        self._require_online("set_target")
        self.building.set_target(elevator, floor)
