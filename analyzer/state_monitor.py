from simulator.infrastructure.message_broker import MessageBroker, STATE_TOPIC, CONNECTION_TOPIC


class ConsoleStateMonitor:
    """
    Text monitor for the controller, reading the broker's broadcast pipe.

    Features:
    - One status line per elevator every `print_every` snapshots
    - Connection state transitions as they happen
    - Session summary (cycles, disconnects, downtime)

    Runs as a SimPy process, so it drains the channel between cycles and
    never blocks the control loop.
    """
    def __init__(self, broker: MessageBroker, print_every: int = 10, verbose: bool = True):
        self.broker = broker
        self.broadcast_pipe = broker.get_broadcast_pipe()
        self.print_every = print_every
        self.verbose = verbose

        self.snapshots_seen = 0
        self.last_snapshot = None
        self.disconnect_count = 0
        self.downtime = 0.0
        self._disconnected_since = None

    def start_listening(self):
        """SimPy process body: consume every published message"""
        while True:
            data = yield self.broadcast_pipe.get()

            topic = data.get('topic', '')
            message = data.get('message')

            if topic == STATE_TOPIC:
                self._on_snapshot(message)
            elif topic == CONNECTION_TOPIC:
                self._on_connection(message)

    def _on_snapshot(self, snapshot):
        self.snapshots_seen += 1
        self.last_snapshot = snapshot
        if self.verbose and self.snapshots_seen % self.print_every == 0:
            self.print_snapshot(snapshot)

    def _on_connection(self, message: dict):
        new_state = message.get('new_state')
        timestamp = message.get('timestamp', self.broker.get_current_time())

        if new_state == "DISCONNECTED" and message.get('old_state') == "CONNECTED":
            self.disconnect_count += 1
        if new_state == "CONNECTED":
            if self._disconnected_since is not None:
                self.downtime += timestamp - self._disconnected_since
                self._disconnected_since = None
        elif self._disconnected_since is None:
            self._disconnected_since = timestamp

        if self.verbose:
            print(f"{timestamp:.2f} [Monitor] Connection {message.get('old_state')} -> {new_state}")

    def print_snapshot(self, snapshot):
        now = self.broker.get_current_time()
        print(f"{now:.2f} [Monitor] Hall calls UP={sorted(snapshot.floor_buttons_up)} "
              f"DOWN={sorted(snapshot.floor_buttons_down)}")
        for elevator in snapshot.elevators:
            marker = "*" if elevator.index == snapshot.selected_elevator else " "
            mode = "AUTO" if elevator.automatic else "MAN "
            print(f"{now:.2f} [Monitor] {marker}E{elevator.index} {mode} "
                  f"floor={elevator.current_floor:>2} target={elevator.current_target:>2} "
                  f"dir={elevator.committed_direction.name:<11} door={elevator.door_status.name:<7} "
                  f"speed={elevator.current_speed:5.2f} load={elevator.current_passenger_weight:6.1f}kg "
                  f"cab={sorted(elevator.active_floor_buttons)}")

    def print_summary(self):
        """Print session statistics"""
        downtime = self.downtime
        if self._disconnected_since is not None:
            downtime += self.broker.get_current_time() - self._disconnected_since

        print("\n" + "=" * 60)
        print("   CONTROLLER SESSION SUMMARY")
        print("=" * 60)
        print(f"  Snapshots published: {self.snapshots_seen:>8}")
        print(f"  Connection losses:   {self.disconnect_count:>8}")
        print(f"  Time disconnected:   {downtime:>8.2f} s")
        print("=" * 60)
