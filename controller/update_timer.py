"""
Update timer

Fixed-cadence driver for the CycleSupervisor, implemented as a SimPy process.
With a simpy.rt.RealtimeEnvironment the cadence follows the wall clock;
with a plain simpy.Environment (tests) ticks run as fast as possible.
"""

import simpy


class UpdateTimer:
    """
    Calls supervisor.update() every `update_rate_ms` milliseconds.

    Operator commands queued from other threads are applied at the start of
    each tick, before the cycle, so they never overlap a running cycle.

    Example:
        >>> env = simpy.rt.RealtimeEnvironment(factor=1.0, strict=False)
        >>> timer = UpdateTimer(env, supervisor, update_rate_ms=100)
        >>> timer.start()
        >>> env.run()
    """

    def __init__(self, env: simpy.Environment, supervisor, update_rate_ms: int = 100,
                 command_queue=None):
        """
        Args:
            env: SimPy environment (time unit: seconds)
            supervisor: CycleSupervisor to drive
            update_rate_ms: Tick interval in milliseconds
            command_queue: Optional OperatorCommandQueue drained every tick
        """
        if update_rate_ms <= 0:
            raise ValueError("update_rate_ms must be positive")
        self.env = env
        self.supervisor = supervisor
        self.interval = update_rate_ms / 1000.0
        self.command_queue = command_queue
        self.tick_count = 0
        self._process = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.is_alive

    def start(self) -> simpy.Process:
        """Start ticking; the first tick runs immediately"""
        if not self.running:
            self._process = self.env.process(self._run())
            print(f"{self.env.now:.2f} [Timer] Started with interval {self.interval:.3f}s")
        return self._process

    def stop(self):
        """Stop ticking after the current tick"""
        if self.running:
            self._process.interrupt("stop")

    def tick(self):
        """Apply pending operator commands, then run one cycle"""
        if self.command_queue is not None:
            self.command_queue.drain(self.supervisor)
        self.supervisor.update()
        self.tick_count += 1

    def _run(self):
        try:
            while True:
                self.tick()
                yield self.env.timeout(self.interval)
        except simpy.Interrupt:
            print(f"{self.env.now:.2f} [Timer] Stopped after {self.tick_count} ticks")
