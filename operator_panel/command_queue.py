"""
Operator command queue

Thread-safe hand-over of operator commands from the HTTP thread to the
control thread. The UpdateTimer drains the queue at the start of each tick.
"""

import queue
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class OperatorCommand:
    """
    A manual command waiting to be applied

    Attributes:
        kind: 'select', 'mode' or 'target'
        elevator: Elevator index
        value: True/False for 'mode', floor for 'target', unused for 'select'
    """
    kind: str
    elevator: int
    value: Optional[object] = None

    KINDS = ('select', 'mode', 'target')

    def __post_init__(self):
        if self.kind not in self.KINDS:
            raise ValueError(f"Unknown command kind '{self.kind}'. Must be one of {self.KINDS}")

    def apply(self, supervisor) -> bool:
        """Run the command against a CycleSupervisor (control thread only)"""
        if self.kind == 'select':
            return supervisor.select_elevator(self.elevator)
        if self.kind == 'mode':
            return supervisor.set_automatic_mode(self.elevator, bool(self.value))
        return supervisor.set_manual_target(self.elevator, int(self.value))

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'elevator': self.elevator, 'value': self.value}


class OperatorCommandQueue:
    """FIFO of OperatorCommands, safe to fill from any thread"""
    def __init__(self):
        self._queue = queue.Queue()

    def submit(self, command: OperatorCommand) -> OperatorCommand:
        self._queue.put(command)
        return command

    def submit_select(self, elevator: int) -> OperatorCommand:
        return self.submit(OperatorCommand('select', elevator))

    def submit_mode(self, elevator: int, automatic: bool) -> OperatorCommand:
        return self.submit(OperatorCommand('mode', elevator, bool(automatic)))

    def submit_target(self, elevator: int, floor: int) -> OperatorCommand:
        return self.submit(OperatorCommand('target', elevator, int(floor)))

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self, supervisor) -> List[Tuple[OperatorCommand, bool]]:
        """
        Apply every queued command in submission order

        Returns:
            List of (command, accepted) pairs
        """
        results = []
        while True:
            try:
                command = self._queue.get_nowait()
            except queue.Empty:
                break
            accepted = command.apply(supervisor)
            print(f"{supervisor.broker.get_current_time():.2f} [Operator] "
                  f"{command.kind} elevator={command.elevator} value={command.value} "
                  f"-> {'accepted' if accepted else 'ignored'}")
            results.append((command, accepted))
        return results
