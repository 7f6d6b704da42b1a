# File: helpers/device_helpers.py
"""Device registry helper functions for StaffBoard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_participant_device_info(
    participant_id: str,
    participant_name: str,
    config_entry: ConfigEntry,
) -> DeviceInfo:
    """Create device info for a participant profile.

    Args:
        participant_id: Internal ID (UUID) of the participant
        participant_name: Display name of the participant
        config_entry: Config entry for this integration instance
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, participant_id)},
        name=f"{participant_name} ({config_entry.title})",
        manufacturer=const.STAFFBOARD_TITLE,
        model="Staff Profile",
        entry_type=DeviceEntryType.SERVICE,
    )


def create_board_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for board-wide entities such as the duty roster.

    Args:
        config_entry: Config entry for this integration instance
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, f"{config_entry.entry_id}_board")},
        name=f"Board ({config_entry.title})",
        manufacturer=const.STAFFBOARD_TITLE,
        model="Staff Board",
        entry_type=DeviceEntryType.SERVICE,
    )
