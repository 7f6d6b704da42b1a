"""Diagnostics support for StaffBoard integration.

The config entry diagnostics return the raw storage data, identical to the
staffboard_data file, plus a ledger audit so balance drift is visible.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry

from . import const
from .coordinator import StaffBoardConfigEntry


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: StaffBoardConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator = entry.runtime_data

    return {
        "storage": coordinator.store.data,
        "balance_audit": {
            participant_id: {"cached": cached, "ledger": replayed}
            for participant_id, (
                cached,
                replayed,
            ) in coordinator.economy_manager.audit_balances().items()
        },
    }


async def async_get_device_diagnostics(
    hass: HomeAssistant, entry: StaffBoardConfigEntry, device: DeviceEntry
) -> dict[str, Any]:
    """Return diagnostics for a participant device."""
    coordinator = entry.runtime_data

    participant_id = None
    for identifier in device.identifiers:
        if identifier[0] == const.DOMAIN:
            participant_id = identifier[1]
            break

    if not participant_id:
        return {"error": "Could not determine participant_id from device identifiers"}

    participant = coordinator.participants_data.get(participant_id)
    if not participant:
        return {"error": f"Participant not found: {participant_id}"}

    return {
        "participant_id": participant_id,
        "participant_data": participant,
        "ledger_balance": coordinator.economy_manager.replay_balance(participant_id),
        "recent_ledger": coordinator.economy_manager.get_history(participant_id),
    }
