"""Base manager class for StaffBoard managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import async_dispatcher_send

from .. import const
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import StaffBoardCoordinator
    from ..store import StaffBoardStore


class BaseManager(ABC):
    """Base class for all StaffBoard managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit)
    - Shortcut to the coordinator's store

    Data Persistence:
    - Mutate records through ``self.store`` and finish every public operation
      with ``await self.coordinator.async_persist_and_update()``

    Subclasses must implement:
    - async_setup(): Initialize or migrate state on load
    """

    def __init__(self, hass: HomeAssistant, coordinator: StaffBoardCoordinator) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def store(self) -> StaffBoardStore:
        """Return the coordinator's store."""
        return self.coordinator.store

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to listeners (entities, other managers).

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_POINTS_CHANGED)
            **payload: Event data dict passed to listeners (must be JSON-serializable)
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Pass payload as single dict argument (dispatcher only supports *args)
        async_dispatcher_send(self.hass, signal, payload)

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager.

        Called once during coordinator initialization, after storage is loaded.
        """
