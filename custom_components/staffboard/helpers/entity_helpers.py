# File: helpers/entity_helpers.py
"""Entity and signal helper functions for StaffBoard.

Functions that build instance-scoped dispatcher signals and look up board
records by their human-facing names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..coordinator import StaffBoardCoordinator


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Each config entry gets its own signal namespace, so managers can emit and
    entities can listen without cross-talk between instances.

    Format: 'staffboard_{entry_id}_{suffix}'

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_POINTS_CHANGED)
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def get_participant_id_by_name(
    coordinator: StaffBoardCoordinator, name: str
) -> str | None:
    """Retrieve the participant internal_id for a display name."""
    for participant_id, participant in coordinator.participants_data.items():
        if participant.get(const.DATA_PARTICIPANT_NAME) == name:
            return participant_id
    return None


def get_participant_points_unique_id(entry_id: str, participant_id: str) -> str:
    """Return the unique_id of a participant's points sensor."""
    return f"{entry_id}_{participant_id}_{const.SENSOR_KEY_PARTICIPANT_POINTS}"
