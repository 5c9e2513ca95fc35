"""
Controller Configuration

This configuration is used with both the simulated and real elevator systems.
Contains only control loop settings, not physical specifications.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ConnectionConfig:
    """How to reach the remote elevator system"""
    mode: str = "xmlrpc"  # xmlrpc, simulated
    url: str = "http://localhost:8000/ElevatorSim"
    timeout: float = 2.0  # seconds per remote call

    def __post_init__(self):
        if self.mode not in ["xmlrpc", "simulated"]:
            raise ValueError("connection.mode must be 'xmlrpc' or 'simulated'")
        if not self.url:
            raise ValueError("connection.url cannot be empty")
        if self.timeout <= 0:
            raise ValueError("connection.timeout must be positive")


@dataclass
class TimerConfig:
    """Control loop cadence"""
    update_rate_ms: int = 100
    realtime_factor: float = 1.0  # wall-clock seconds per controller second

    def __post_init__(self):
        if self.update_rate_ms <= 0:
            raise ValueError("update_rate_ms must be positive")
        if self.realtime_factor <= 0:
            raise ValueError("realtime_factor must be positive")


@dataclass
class DispatchConfig:
    """Session and mode policy"""
    preserve_modes_on_reconnect: bool = True
    default_automatic: bool = False


@dataclass
class OperatorApiConfig:
    """Operator HTTP API"""
    enabled: bool = False
    host: str = "localhost"
    port: int = 5000

    def __post_init__(self):
        if not (0 < self.port < 65536):
            raise ValueError(f"operator_api.port must be between 1 and 65535, got {self.port}")


@dataclass
class LoggingConfig:
    """Console output"""
    log_publish: bool = False  # print every broker message
    monitor: bool = True  # print a status line per published snapshot
    monitor_every: int = 10  # print every n-th snapshot

    def __post_init__(self):
        if self.monitor_every < 1:
            raise ValueError("logging.monitor_every must be at least 1")


@dataclass
class ControllerConfig:
    """
    Complete controller configuration

    Combines connection, timer, dispatch, operator API and logging settings.
    """
    connection: Optional[ConnectionConfig] = None
    timer: Optional[TimerConfig] = None
    dispatch: Optional[DispatchConfig] = None
    operator_api: Optional[OperatorApiConfig] = None
    logging: Optional[LoggingConfig] = None

    def __post_init__(self):
        # Set defaults if not provided
        if self.connection is None:
            self.connection = ConnectionConfig()
        if self.timer is None:
            self.timer = TimerConfig()
        if self.dispatch is None:
            self.dispatch = DispatchConfig()
        if self.operator_api is None:
            self.operator_api = OperatorApiConfig()
        if self.logging is None:
            self.logging = LoggingConfig()

    @classmethod
    def from_dict(cls, data: dict) -> 'ControllerConfig':
        """Create ControllerConfig from dictionary"""
        ctl_data = data.get('controller', data) or {}

        connection_data = ctl_data.get('connection', {})
        connection = ConnectionConfig(
            mode=connection_data.get('mode', 'xmlrpc'),
            url=connection_data.get('url', 'http://localhost:8000/ElevatorSim'),
            timeout=connection_data.get('timeout', 2.0)
        )

        timer_data = ctl_data.get('timer', {})
        timer = TimerConfig(
            update_rate_ms=timer_data.get('update_rate_ms', 100),
            realtime_factor=timer_data.get('realtime_factor', 1.0)
        )

        dispatch_data = ctl_data.get('dispatch', {})
        dispatch = DispatchConfig(
            preserve_modes_on_reconnect=dispatch_data.get('preserve_modes_on_reconnect', True),
            default_automatic=dispatch_data.get('default_automatic', False)
        )

        api_data = ctl_data.get('operator_api', {})
        operator_api = OperatorApiConfig(
            enabled=api_data.get('enabled', False),
            host=api_data.get('host', 'localhost'),
            port=api_data.get('port', 5000)
        )

        logging_data = ctl_data.get('logging', {})
        logging = LoggingConfig(
            log_publish=logging_data.get('log_publish', False),
            monitor=logging_data.get('monitor', True),
            monitor_every=logging_data.get('monitor_every', 10)
        )

        return cls(
            connection=connection,
            timer=timer,
            dispatch=dispatch,
            operator_api=operator_api,
            logging=logging
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'controller': {
                'connection': {
                    'mode': self.connection.mode,
                    'url': self.connection.url,
                    'timeout': self.connection.timeout
                },
                'timer': {
                    'update_rate_ms': self.timer.update_rate_ms,
                    'realtime_factor': self.timer.realtime_factor
                },
                'dispatch': {
                    'preserve_modes_on_reconnect': self.dispatch.preserve_modes_on_reconnect,
                    'default_automatic': self.dispatch.default_automatic
                },
                'operator_api': {
                    'enabled': self.operator_api.enabled,
                    'host': self.operator_api.host,
                    'port': self.operator_api.port
                },
                'logging': {
                    'log_publish': self.logging.log_publish,
                    'monitor': self.logging.monitor,
                    'monitor_every': self.logging.monitor_every
                }
            }
        }

    def validate(self):
        """Validate configuration consistency"""
        if self.connection.mode == "xmlrpc" and not self.connection.url.startswith(("http://", "https://")):
            raise ValueError(f"connection.url must be an http(s) URL, got '{self.connection.url}'")
        # A remote call must not outlive several ticks
        if self.connection.timeout * 1000 > 50 * self.timer.update_rate_ms:
            raise ValueError(
                f"connection.timeout ({self.connection.timeout}s) is too long for "
                f"update_rate_ms ({self.timer.update_rate_ms})"
            )
