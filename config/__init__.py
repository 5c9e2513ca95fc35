"""
Configuration management package

Provides configuration classes for both the controller and the simulator.
"""

from .controller import (
    ControllerConfig,
    ConnectionConfig,
    TimerConfig,
    DispatchConfig,
    OperatorApiConfig,
    LoggingConfig
)

from .simulation import (
    SimulationConfig,
    BuildingConfig,
    ElevatorConfig,
    TrafficConfig,
    ServerConfig
)

from .config_loader import (
    ConfigLoader,
    load_controller_config,
    load_simulation_config,
    save_controller_config,
    save_simulation_config
)

__all__ = [
    # Controller
    'ControllerConfig',
    'ConnectionConfig',
    'TimerConfig',
    'DispatchConfig',
    'OperatorApiConfig',
    'LoggingConfig',

    # Simulation
    'SimulationConfig',
    'BuildingConfig',
    'ElevatorConfig',
    'TrafficConfig',
    'ServerConfig',

    # Loader
    'ConfigLoader',
    'load_controller_config',
    'load_simulation_config',
    'save_controller_config',
    'save_simulation_config',
]
