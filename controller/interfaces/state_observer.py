"""
State Observer Interface

Defines how presentation layers receive building state updates.
"""

from abc import ABC, abstractmethod

from ..model.building import BuildingSnapshot


class IStateObserver(ABC):
    """
    Interface for consumers of published building state

    on_state_changed() is called synchronously on the control thread after
    every successful cycle and after every manual command that changed local
    state. Implementations must return quickly and must not call back into
    the supervisor.
    """

    @abstractmethod
    def on_state_changed(self, snapshot: BuildingSnapshot) -> None:
        """
        Receive the latest state

        Args:
            snapshot: Immutable view of the building state
        """
        pass
