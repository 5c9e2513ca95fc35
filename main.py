import random
import sys

import simpy.rt

# Configuration
from config import load_controller_config, load_simulation_config, ControllerConfig, SimulationConfig

# Infrastructure
from simulator.infrastructure.message_broker import MessageBroker, CONNECTION_TOPIC
from simulator.building_simulator import SimulatedBuilding, SimulatedElevatorPort

# Controller
from controller.supervisor import CycleSupervisor
from controller.update_timer import UpdateTimer
from controller.remote.xmlrpc_port import XmlRpcElevatorPort

# Operator panel
from operator_panel import OperatorCommandQueue, LatestStateCache, create_app, run_server_in_thread

# Analyzer
from analyzer.state_monitor import ConsoleStateMonitor


def build_port(env, ctl_config: ControllerConfig, sim_config: SimulationConfig):
    """
    Create the elevator port selected by connection.mode

    Returns:
        (port, building) - building is None unless running the in-process simulator
    """
    if ctl_config.connection.mode == "xmlrpc":
        print(f"Remote elevator endpoint: {ctl_config.connection.url}")
        return XmlRpcElevatorPort(ctl_config.connection.url, ctl_config.connection.timeout), None

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
    print(f"In-process simulated building: {building.num_floors} floors, {building.num_elevators} elevators")
    return SimulatedElevatorPort(building), building


def run_controller(ctl_config_path=None, sim_config_path=None, until=None):
    """
    Set up and run the elevator control center

    Args:
        ctl_config_path: Path to controller configuration YAML file (defaults if None)
        sim_config_path: Path to simulation configuration YAML file (defaults if None)
        until: Stop after this many seconds (run forever if None)
    """
    print("--- Loading Configuration ---")
    ctl_config = load_controller_config(ctl_config_path) if ctl_config_path else ControllerConfig()
    sim_config = load_simulation_config(sim_config_path) if sim_config_path else SimulationConfig()
    print(f"Controller Config: {ctl_config_path or '(defaults)'}")
    if ctl_config.connection.mode == "simulated":
        print(f"Simulation Config: {sim_config_path or '(defaults)'}")

    print("\n--- Controller Setup ---")
    env = simpy.rt.RealtimeEnvironment(factor=ctl_config.timer.realtime_factor, strict=False)
    broker = MessageBroker(env, log_messages=ctl_config.logging.log_publish)

    port, _ = build_port(env, ctl_config, sim_config)

    supervisor = CycleSupervisor(
        port, broker,
        preserve_modes_on_reconnect=ctl_config.dispatch.preserve_modes_on_reconnect,
        default_automatic=ctl_config.dispatch.default_automatic
    )

    monitor = ConsoleStateMonitor(broker, print_every=ctl_config.logging.monitor_every,
                                  verbose=ctl_config.logging.monitor)
    env.process(monitor.start_listening())

    command_queue = OperatorCommandQueue()
    if ctl_config.operator_api.enabled:
        state_cache = LatestStateCache()
        supervisor.add_observer(state_cache)
        broker.subscribe(CONNECTION_TOPIC, state_cache.on_connection_changed)
        app = create_app(command_queue, state_cache)
        run_server_in_thread(app, ctl_config.operator_api.host, ctl_config.operator_api.port)

    timer = UpdateTimer(env, supervisor, ctl_config.timer.update_rate_ms, command_queue)
    timer.start()

    print("\n--- Running ---")
    try:
        env.run(until=until)
    finally:
        monitor.print_summary()


def main():
    # Accept command line arguments for config files
    ctl_config_path = sys.argv[1] if len(sys.argv) > 1 else None
    sim_config_path = sys.argv[2] if len(sys.argv) > 2 else None
    try:
        run_controller(ctl_config_path=ctl_config_path, sim_config_path=sim_config_path)
    except KeyboardInterrupt:
        print("\nController stopped by user (Ctrl+C).")


if __name__ == '__main__':
    main()
