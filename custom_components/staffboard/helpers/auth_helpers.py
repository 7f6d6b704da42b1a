# File: helpers/auth_helpers.py
"""Authorization helper functions for StaffBoard.

Functions that map Home Assistant users to board participants.
All functions here require a `hass` object for auth system access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError, Unauthorized

from .. import const
from .entity_helpers import get_participant_id_by_name

if TYPE_CHECKING:
    from homeassistant.auth.models import User
    from homeassistant.core import HomeAssistant

    from ..coordinator import StaffBoardCoordinator


# ==============================================================================
# Coordinator Access
# ==============================================================================


def get_staffboard_coordinator(hass: HomeAssistant) -> StaffBoardCoordinator:
    """Retrieve the StaffBoard coordinator from the loaded config entry.

    Raises:
        HomeAssistantError: If no StaffBoard entry is loaded.
    """
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state.name == "LOADED":
            return entry.runtime_data

    raise HomeAssistantError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_NO_ENTRY_LOADED,
    )


# ==============================================================================
# Participant Resolution
# ==============================================================================


async def is_ha_admin(hass: HomeAssistant, user_id: str | None) -> bool:
    """Return True when the Home Assistant user is an administrator."""
    if not user_id:
        return False

    user: User | None = await hass.auth.async_get_user(user_id)
    if not user:
        const.LOGGER.warning("WARNING: Authorization: Invalid user ID '%s'", user_id)
        return False
    return user.is_admin


async def resolve_acting_participant(
    hass: HomeAssistant,
    coordinator: StaffBoardCoordinator,
    user_id: str | None,
    acting_as: str | None = None,
) -> str | None:
    """Resolve the participant a service call acts for.

    - No ``acting_as``: the participant linked to the calling HA user, or None
      when the user is not linked (the manager then rejects the call).
    - ``acting_as`` given: allowed for system calls (automations carry no user),
      HA administrators, and the participant's own linked user.

    Raises:
        HomeAssistantError: ``acting_as`` names no participant.
        Unauthorized: The caller may not act for ``acting_as``.
    """
    if not acting_as:
        if not user_id:
            return None
        return coordinator.participant_manager.get_participant_id_for_user(user_id)

    participant_id = get_participant_id_by_name(coordinator, acting_as)
    if not participant_id:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
            translation_placeholders={
                "item_type": const.LABEL_PARTICIPANT,
                "item_id": acting_as,
            },
        )

    if not user_id or await is_ha_admin(hass, user_id):
        return participant_id

    linked = coordinator.participants_data[participant_id].get(
        const.DATA_PARTICIPANT_HA_USER_ID
    )
    if linked != user_id:
        const.LOGGER.warning(
            "WARNING: Authorization: user '%s' may not act as '%s'", user_id, acting_as
        )
        raise Unauthorized(context=None, user_id=user_id)
    return participant_id
