"""
Simulation Configuration

This configuration is used only with the simulated elevator system.
Contains the physical specifications of the simulated building.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BuildingConfig:
    """Building specifications"""
    num_floors: int = 10
    num_elevators: int = 2
    floor_height: float = 3.5  # meters

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        if self.num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")
        if self.floor_height <= 0:
            raise ValueError("floor_height must be positive")


@dataclass
class ElevatorConfig:
    """Elevator specifications"""
    rated_speed: float = 2.5  # m/s
    door_time: float = 1.0  # seconds per opening or closing
    capacity: int = 10  # persons

    def __post_init__(self):
        if self.rated_speed <= 0:
            raise ValueError("rated_speed must be positive")
        if self.door_time <= 0:
            raise ValueError("door_time must be positive")
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")


@dataclass
class TrafficConfig:
    """Random button presses"""
    call_rate: float = 0.0  # presses per second, 0 = no traffic
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.call_rate < 0:
            raise ValueError("call_rate cannot be negative")


@dataclass
class ServerConfig:
    """XML-RPC endpoint of the simulator"""
    host: str = "localhost"
    port: int = 8000

    def __post_init__(self):
        if not (0 < self.port < 65536):
            raise ValueError(f"server.port must be between 1 and 65535, got {self.port}")


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines building, elevator, traffic and server settings.
    """
    building: Optional[BuildingConfig] = None
    elevator: Optional[ElevatorConfig] = None
    traffic: Optional[TrafficConfig] = None
    server: Optional[ServerConfig] = None

    def __post_init__(self):
        if self.building is None:
            self.building = BuildingConfig()
        if self.elevator is None:
            self.elevator = ElevatorConfig()
        if self.traffic is None:
            self.traffic = TrafficConfig()
        if self.server is None:
            self.server = ServerConfig()

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data) or {}

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 10),
            num_elevators=building_data.get('num_elevators', 2),
            floor_height=building_data.get('floor_height', 3.5)
        )

        elevator_data = sim_data.get('elevator', {})
        elevator = ElevatorConfig(
            rated_speed=elevator_data.get('rated_speed', 2.5),
            door_time=elevator_data.get('door_time', 1.0),
            capacity=elevator_data.get('capacity', 10)
        )

        traffic_data = sim_data.get('traffic', {})
        traffic = TrafficConfig(
            call_rate=traffic_data.get('call_rate', 0.0),
            random_seed=traffic_data.get('random_seed')
        )

        server_data = sim_data.get('server', {})
        server = ServerConfig(
            host=server_data.get('host', 'localhost'),
            port=server_data.get('port', 8000)
        )

        return cls(building=building, elevator=elevator, traffic=traffic, server=server)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors,
                    'num_elevators': self.building.num_elevators,
                    'floor_height': self.building.floor_height
                },
                'elevator': {
                    'rated_speed': self.elevator.rated_speed,
                    'door_time': self.elevator.door_time,
                    'capacity': self.elevator.capacity
                },
                'traffic': {
                    'call_rate': self.traffic.call_rate
                },
                'server': {
                    'host': self.server.host,
                    'port': self.server.port
                }
            }
        }

        if self.traffic.random_seed is not None:
            result['simulation']['traffic']['random_seed'] = self.traffic.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        # Travelling one floor must take at least one physics step (0.1 s)
        if self.building.floor_height / self.elevator.rated_speed < 0.1:
            raise ValueError(
                f"rated_speed ({self.elevator.rated_speed} m/s) is too high for "
                f"floor_height ({self.building.floor_height} m)"
            )
