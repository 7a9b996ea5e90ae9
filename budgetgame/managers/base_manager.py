"""Base manager class for Budget Game managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..coordinator import BudgetGameCoordinator


class BaseManager(ABC):
    """Base class for all Budget Game managers with scoped event support.

    Provides:
    - Event emitting through the coordinator's dispatcher (emit)
    - Event listening through the coordinator's dispatcher (listen)

    Managers read snapshots from the coordinator's stores on every call and
    hold no store data between calls.

    Subclasses must implement:
    - setup(): Subscribe to events, initialize state
    """

    def __init__(self, coordinator: BudgetGameCoordinator) -> None:
        """Initialize manager.

        Args:
            coordinator: Parent coordinator owning the stores and dispatcher
        """
        self.coordinator = coordinator

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit an event to other managers and external listeners.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_WEEK_FINALIZED)
            **payload: Event data passed to listeners as a single dict

        Example:
            self.emit(
                const.SIGNAL_SUFFIX_FINANCIAL_GOAL_COMPLETED,
                household_id=goal.household_id,
                goal_id=goal.goal_id,
            )
        """
        const.LOGGER.debug(
            "Emitting event '%s' with payload keys: %s", suffix, list(payload.keys())
        )
        self.coordinator.dispatch(suffix, payload)

    def listen(self, suffix: str, callback: Callable[[dict[str, Any]], Any]) -> None:
        """Subscribe to an event for the lifetime of the coordinator.

        Args:
            suffix: Signal suffix constant to listen for
            callback: Function called with the payload dict
        """
        self.coordinator.connect(suffix, callback)
        const.LOGGER.debug(
            "Manager %s listening to event '%s'", self.__class__.__name__, suffix
        )

    @abstractmethod
    def setup(self) -> None:
        """Set up the manager (subscribe to events, initialize state).

        Called once during coordinator initialization.
        """
