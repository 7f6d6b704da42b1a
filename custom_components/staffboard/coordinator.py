# File: coordinator.py
"""Coordinator for the StaffBoard integration.

Owns the store and the managers that implement the board workflows
(participants, engagement toggles, the point ledger, entries, the duty roster).
The coordinator does not poll; every manager operation persists and pushes
the new snapshot to listening entities through ``async_persist_and_update``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .managers import (
    DutyManager,
    EconomyManager,
    EngagementManager,
    EntryManager,
    ParticipantManager,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import StaffBoardStore
    from .type_defs import EntryData, ParticipantData

type StaffBoardConfigEntry = ConfigEntry[StaffBoardCoordinator]


class StaffBoardCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for StaffBoard integration.

    Manages data primarily using internal_id for participants and entries.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: StaffBoardStore,
    ) -> None:
        """Initialize the StaffBoardCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store

        self.participant_manager = ParticipantManager(hass, self)
        self.economy_manager = EconomyManager(hass, self)
        self.engagement_manager = EngagementManager(hass, self)
        self.entry_manager = EntryManager(hass, self)
        self.duty_manager = DutyManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Data access
    # -------------------------------------------------------------------------------------

    @property
    def participants_data(self) -> dict[str, ParticipantData]:
        """Return the participants dict."""
        return self.store.participants

    @property
    def entries_data(self) -> dict[str, EntryData]:
        """Return the entries dict."""
        return self.store.entries

    @property
    def points_label(self) -> str:
        """Return the configured label for points."""
        return self.config_entry.options.get(
            const.CONF_POINTS_LABEL, const.DEFAULT_POINTS_LABEL
        )

    @property
    def points_icon(self) -> str:
        """Return the configured icon for points."""
        return self.config_entry.options.get(
            const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON
        )

    # -------------------------------------------------------------------------------------
    # Setup + Refresh
    # -------------------------------------------------------------------------------------

    async def async_setup_managers(self) -> None:
        """Run each manager's setup (migrations, audits) in dependency order."""
        for manager in (
            self.participant_manager,
            self.economy_manager,
            self.engagement_manager,
            self.entry_manager,
            self.duty_manager,
        ):
            await manager.async_setup()
        const.LOGGER.debug(
            "DEBUG: StaffBoard managers set up for %s", self.config_entry.entry_id
        )

    async def _async_update_data(self) -> dict[str, Any]:
        """Return the in-memory snapshot; storage is the only source."""
        return self.store.data

    async def async_persist_and_update(self) -> None:
        """Save to storage, then push the new snapshot and queued point events.

        Raises:
            HomeAssistantError: The storage write failed.
        """
        try:
            await self.store.async_save()
        except HomeAssistantError:
            self.economy_manager.discard_point_events()
            raise
        self.async_set_updated_data(self.store.data)
        self.economy_manager.flush_point_events()
