# File: __init__.py
"""Initialization file for the StaffBoard integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator and its managers.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization with push-style updates.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady, HomeAssistantError
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import StaffBoardConfigEntry, StaffBoardCoordinator
from .services import async_setup_services, async_unload_services
from .store import StaffBoardStore
from .utils.dt_utils import set_default_timezone


async def async_setup_entry(
    hass: HomeAssistant, entry: StaffBoardConfigEntry
) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for StaffBoard entry: %s", entry.entry_id)

    # Must run before any component reads "today"
    time_zone = dt_util.get_time_zone(hass.config.time_zone)
    if time_zone is not None:
        set_default_timezone(time_zone)

    # Initialize the store to handle persistent data.
    store = StaffBoardStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = StaffBoardCoordinator(hass, entry, store)

    try:
        await coordinator.async_setup_managers()
        await coordinator.async_config_entry_first_refresh()
    except HomeAssistantError as err:
        const.LOGGER.error("ERROR: Failed to set up StaffBoard data: %s", err)
        raise ConfigEntryNotReady from err

    entry.runtime_data = coordinator

    # Services are domain-wide; registering twice is harmless.
    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_update_options))

    const.LOGGER.info("INFO: StaffBoard setup complete for entry: %s", entry.entry_id)
    return True


async def async_update_options(
    hass: HomeAssistant, entry: StaffBoardConfigEntry
) -> None:
    """Reload the entry when options (points label/icon) change."""
    const.LOGGER.debug("DEBUG: Options updated for %s, reloading", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(
    hass: HomeAssistant, entry: StaffBoardConfigEntry
) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading StaffBoard entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        still_loaded = [
            other
            for other in hass.config_entries.async_entries(const.DOMAIN)
            if other.entry_id != entry.entry_id
            and other.state is ConfigEntryState.LOADED
        ]
        if not still_loaded:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(
    hass: HomeAssistant, entry: StaffBoardConfigEntry
) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing StaffBoard entry: %s", entry.entry_id)

    store = StaffBoardStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: StaffBoard entry data cleared: %s", entry.entry_id)
