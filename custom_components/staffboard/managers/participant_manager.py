"""Participant Manager - Staff profiles and their lifecycle.

This manager owns the participants bucket:
- Creating participants (optionally linked to a Home Assistant user)
- Lifecycle changes (active, hidden, deleted) and the board admin role
- Authentication checks used before any mutation
- Migration of legacy ``is_hidden`` / ``is_deleted`` flags to ``lifecycle``
"""

from __future__ import annotations

from typing import TYPE_CHECKING
import uuid

from homeassistant.exceptions import (
    HomeAssistantError,
    ServiceValidationError,
    Unauthorized,
)

from .. import const
from ..const import ParticipantLifecycle
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import ParticipantData


class ParticipantManager(BaseManager):
    """Manager for participant records.

    A hidden participant stays fully functional (hidden only affects listings).
    A deleted participant can no longer act on the board; its ledger history
    is kept.
    """

    async def async_setup(self) -> None:
        """Migrate legacy lifecycle flags on load."""
        migrated = 0
        for participant in self.store.participants.values():
            if self._migrate_legacy_flags(participant):
                migrated += 1

        if migrated:
            const.LOGGER.info(
                "INFO: Migrated lifecycle flags for %s participant(s)", migrated
            )
            await self.store.async_save()

    @staticmethod
    def _migrate_legacy_flags(participant: dict) -> bool:
        """Fold is_hidden / is_deleted into a single lifecycle value.

        Deleted wins over hidden. Returns True when the record changed.
        """
        has_legacy = (
            const.DATA_PARTICIPANT_LEGACY_IS_HIDDEN in participant
            or const.DATA_PARTICIPANT_LEGACY_IS_DELETED in participant
        )
        if not has_legacy and const.DATA_PARTICIPANT_LIFECYCLE in participant:
            return False

        is_deleted = bool(
            participant.pop(const.DATA_PARTICIPANT_LEGACY_IS_DELETED, False)
        )
        is_hidden = bool(participant.pop(const.DATA_PARTICIPANT_LEGACY_IS_HIDDEN, False))

        if is_deleted:
            participant[const.DATA_PARTICIPANT_LIFECYCLE] = str(
                ParticipantLifecycle.DELETED
            )
        elif is_hidden:
            participant[const.DATA_PARTICIPANT_LIFECYCLE] = str(
                ParticipantLifecycle.HIDDEN
            )
        else:
            participant.setdefault(
                const.DATA_PARTICIPANT_LIFECYCLE, str(ParticipantLifecycle.ACTIVE)
            )
        participant.setdefault(const.DATA_PARTICIPANT_POINTS, 0)
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_participant(self, participant_id: str) -> ParticipantData | None:
        """Return a participant record by id."""
        return self.store.participants.get(participant_id)

    def get_participant_id_for_user(self, ha_user_id: str) -> str | None:
        """Return the participant linked to a Home Assistant user."""
        for participant_id, participant in self.store.participants.items():
            if participant.get(const.DATA_PARTICIPANT_HA_USER_ID) == ha_user_id:
                return participant_id
        return None

    def is_admin(self, participant_id: str) -> bool:
        """Return True when the participant has board admin rights."""
        participant = self.get_participant(participant_id)
        return bool(participant and participant.get(const.DATA_PARTICIPANT_IS_ADMIN))

    def require_authenticated(self, participant_id: str | None) -> ParticipantData:
        """Return the acting participant or raise Unauthorized.

        Raises:
            Unauthorized: No participant id, unknown id, or a deleted participant.
        """
        participant = self.get_participant(participant_id) if participant_id else None
        if (
            participant is None
            or participant.get(const.DATA_PARTICIPANT_LIFECYCLE)
            == ParticipantLifecycle.DELETED
        ):
            const.LOGGER.warning(
                "ParticipantManager.require_authenticated: rejected participant=%s",
                participant_id,
            )
            raise Unauthorized()
        return participant

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add_participant(
        self,
        name: str,
        ha_user_id: str | None = None,
        is_admin: bool = False,
    ) -> str:
        """Create a participant and return its internal id.

        Raises:
            HomeAssistantError: The name is already taken.
        """
        for participant in self.store.participants.values():
            if participant.get(const.DATA_PARTICIPANT_NAME) == name:
                raise HomeAssistantError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_DUPLICATE_PARTICIPANT,
                    translation_placeholders={"name": name},
                )

        participant_id = str(uuid.uuid4())
        self.store.participants[participant_id] = {
            "internal_id": participant_id,
            "name": name,
            "ha_user_id": ha_user_id,
            "is_admin": is_admin,
            "lifecycle": str(ParticipantLifecycle.ACTIVE),
            "points": 0,
            "created_at": dt_now_iso(),
        }
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Added participant '%s' (%s), admin=%s", name, participant_id, is_admin
        )
        self.emit(
            const.SIGNAL_SUFFIX_PARTICIPANT_ADDED,
            participant_id=participant_id,
            name=name,
        )
        return participant_id

    async def set_lifecycle(
        self, participant_id: str, lifecycle: ParticipantLifecycle
    ) -> None:
        """Change a participant's lifecycle state.

        Raises:
            HomeAssistantError: Unknown participant.
        """
        participant = self.get_participant(participant_id)
        if participant is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "item_type": const.LABEL_PARTICIPANT,
                    "item_id": participant_id,
                },
            )

        previous = participant.get(const.DATA_PARTICIPANT_LIFECYCLE)
        participant["lifecycle"] = str(ParticipantLifecycle(lifecycle))
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Participant '%s' lifecycle %s -> %s",
            participant.get(const.DATA_PARTICIPANT_NAME),
            previous,
            lifecycle,
        )
        self.emit(
            const.SIGNAL_SUFFIX_PARTICIPANT_UPDATED,
            participant_id=participant_id,
            lifecycle=str(lifecycle),
        )

    async def set_admin_role(self, participant_id: str, is_admin: bool) -> None:
        """Grant or revoke board admin rights.

        Raises:
            HomeAssistantError: Unknown participant.
            ServiceValidationError: Revoking the last non-deleted admin.
        """
        participant = self.get_participant(participant_id)
        if participant is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "item_type": const.LABEL_PARTICIPANT,
                    "item_id": participant_id,
                },
            )

        if not is_admin and participant.get(const.DATA_PARTICIPANT_IS_ADMIN):
            other_admins = [
                other_id
                for other_id, other in self.store.participants.items()
                if other_id != participant_id
                and other.get(const.DATA_PARTICIPANT_IS_ADMIN)
                and other.get(const.DATA_PARTICIPANT_LIFECYCLE)
                != ParticipantLifecycle.DELETED
            ]
            if not other_admins:
                const.LOGGER.warning(
                    "ParticipantManager.set_admin_role: refusing to demote the "
                    "last admin %s",
                    participant_id,
                )
                raise ServiceValidationError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_LAST_ADMIN,
                    translation_placeholders={
                        "name": participant.get(const.DATA_PARTICIPANT_NAME, "")
                    },
                )

        participant["is_admin"] = is_admin
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Participant '%s' admin=%s",
            participant.get(const.DATA_PARTICIPANT_NAME),
            is_admin,
        )
        self.emit(
            const.SIGNAL_SUFFIX_PARTICIPANT_UPDATED,
            participant_id=participant_id,
            is_admin=is_admin,
        )
