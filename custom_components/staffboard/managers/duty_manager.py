"""Duty Manager - Rotating duty roster (e.g. cleaning duty).

This manager handles:
- Applying a recurrence rule to the roster (assign or clear mode)
- Single-date assignment and clearing
- Roster queries by date and by date range
- The duty-day board entry addressed to the people on duty

Any active participant may edit the roster. Rows are keyed on (date, slot);
writes overwrite silently (last write wins).
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from .. import const
from ..const import EntryType, EntryVisibility, ParticipantLifecycle
from ..engines.recurrence_engine import RecurrenceEngine, RecurrenceRule
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import DutyAssignmentData, EntryData


class DutyManager(BaseManager):
    """Manager for duty assignments."""

    async def async_setup(self) -> None:
        """Nothing to prepare; the roster is request driven."""

    @staticmethod
    def _validate_slot(slot: int) -> None:
        """Raise when the slot is outside 1..DUTY_MAX_SLOTS."""
        if not 1 <= slot <= const.DUTY_MAX_SLOTS:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_SLOT,
                translation_placeholders={
                    "slot": str(slot),
                    "max": str(const.DUTY_MAX_SLOTS),
                },
            )

    def _require_assignee(self, assignee_id: str) -> None:
        """Raise unless the assignee exists and is not deleted."""
        assignee = self.coordinator.participant_manager.get_participant(assignee_id)
        if (
            assignee is None
            or assignee.get(const.DATA_PARTICIPANT_LIFECYCLE)
            == ParticipantLifecycle.DELETED
        ):
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "item_type": const.LABEL_PARTICIPANT,
                    "item_id": assignee_id,
                },
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_assignees(self, duty_date: date) -> list[DutyAssignmentData]:
        """Return the assignments for one date ordered by slot."""
        iso_date = duty_date.isoformat()
        return sorted(
            (
                row
                for row in self.store.duty_assignments.values()
                if row[const.DATA_DUTY_DATE] == iso_date
            ),
            key=lambda row: row[const.DATA_DUTY_SLOT],
        )

    def get_assignments_in_range(
        self, start_date: date, end_date: date
    ) -> list[DutyAssignmentData]:
        """Return assignments between two dates (inclusive), by date then slot."""
        start_iso, end_iso = start_date.isoformat(), end_date.isoformat()
        return sorted(
            (
                row
                for row in self.store.duty_assignments.values()
                if start_iso <= row[const.DATA_DUTY_DATE] <= end_iso
            ),
            key=lambda row: (row[const.DATA_DUTY_DATE], row[const.DATA_DUTY_SLOT]),
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def apply_duty_recurrence(
        self,
        actor_id: str | None,
        start_date: date,
        rule: RecurrenceRule,
        assignee_id: str | None,
        slot: int = const.DUTY_SLOT_DEFAULT,
    ) -> list[str]:
        """Apply a recurrence rule to the roster.

        Args:
            actor_id: Participant performing the edit
            start_date: First candidate date
            rule: Recurrence rule; a weekly rule must name at least one weekday
            assignee_id: Participant to assign, or None to clear (clear mode)
            slot: Roster slot (1..DUTY_MAX_SLOTS)

        Returns:
            ISO dates affected.

        Raises:
            Unauthorized: No authenticated actor.
            ServiceValidationError: Invalid range, selection, or slot.
        """
        actor = self.coordinator.participant_manager.require_authenticated(actor_id)
        self._validate_slot(slot)
        if assignee_id is not None:
            self._require_assignee(assignee_id)

        validation = RecurrenceEngine.validate(
            start_date,
            rule,
            max_occurrences=const.MAX_GENERATED_DATES,
            require_weekdays=True,
            allow_empty=True,
        )
        if not validation.is_valid:
            const.LOGGER.warning(
                "DutyManager.apply_duty_recurrence: rejected recurrence (%s) %s",
                validation.error_key,
                validation.placeholders,
            )
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=validation.error_key,
                translation_placeholders=validation.placeholders,
            )

        iso_dates = [d.isoformat() for d in validation.dates]
        if assignee_id is None:
            for iso_date in iso_dates:
                self.store.delete_duty_assignment(iso_date, slot)
        else:
            for iso_date in iso_dates:
                self.store.upsert_duty_assignment(
                    iso_date, slot, assignee_id, actor["internal_id"]
                )
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Duty roster %s for %s date(s), slot=%s, assignee=%s",
            "cleared" if assignee_id is None else "assigned",
            len(iso_dates),
            slot,
            assignee_id,
        )
        self.emit(
            const.SIGNAL_SUFFIX_DUTY_UPDATED,
            dates=iso_dates,
            slot=slot,
            assignee_id=assignee_id,
        )
        return iso_dates

    async def set_assignment(
        self,
        actor_id: str | None,
        duty_date: date,
        assignee_id: str,
        slot: int = const.DUTY_SLOT_DEFAULT,
    ) -> None:
        """Assign one date and slot, overwriting any existing assignee."""
        actor = self.coordinator.participant_manager.require_authenticated(actor_id)
        self._validate_slot(slot)
        self._require_assignee(assignee_id)

        self.store.upsert_duty_assignment(
            duty_date.isoformat(), slot, assignee_id, actor["internal_id"]
        )
        await self.coordinator.async_persist_and_update()

        const.LOGGER.debug(
            "DutyManager.set_assignment: date=%s slot=%s assignee=%s",
            duty_date,
            slot,
            assignee_id,
        )
        self.emit(
            const.SIGNAL_SUFFIX_DUTY_UPDATED,
            dates=[duty_date.isoformat()],
            slot=slot,
            assignee_id=assignee_id,
        )

    async def clear_assignment(
        self,
        actor_id: str | None,
        duty_date: date,
        slot: int = const.DUTY_SLOT_DEFAULT,
    ) -> bool:
        """Clear one date and slot. Returns True when an assignment existed."""
        self.coordinator.participant_manager.require_authenticated(actor_id)
        self._validate_slot(slot)

        existed = self.store.delete_duty_assignment(duty_date.isoformat(), slot)
        await self.coordinator.async_persist_and_update()

        self.emit(
            const.SIGNAL_SUFFIX_DUTY_UPDATED,
            dates=[duty_date.isoformat()],
            slot=slot,
            assignee_id=None,
        )
        return existed

    # -------------------------------------------------------------------------
    # Duty-day entry
    # -------------------------------------------------------------------------

    def _find_duty_entry(self, iso_date: str) -> EntryData | None:
        """Return the visible duty entry for a date, if one exists."""
        for entry in self.store.entries.values():
            if (
                entry.get(const.DATA_ENTRY_TYPE) == EntryType.DUTY
                and entry.get(const.DATA_ENTRY_TARGET_DATE) == iso_date
                and entry.get(const.DATA_ENTRY_PARENT_ID) is None
                and entry.get(const.DATA_ENTRY_VISIBILITY) == EntryVisibility.VISIBLE
            ):
                return entry
        return None

    async def get_or_create_duty_entry(self, duty_date: date) -> EntryData | None:
        """Return the board entry for the people on duty, creating it if needed.

        One entry exists per date. It is authored by and addressed to the
        slot 1 assignee (or the lowest slot filled) and mentions every assignee.
        When the roster changes the same entry is refreshed, so replies and
        engagement survive. No POST points are awarded for it.

        Returns:
            The entry, or None when nobody is on duty that day.
        """
        assignees = self.get_assignees(duty_date)
        if not assignees:
            return None

        primary_id = assignees[0][const.DATA_DUTY_ASSIGNEE_ID]
        participants = self.coordinator.participants_data
        names = [
            participants[row[const.DATA_DUTY_ASSIGNEE_ID]][const.DATA_PARTICIPANT_NAME]
            for row in assignees
            if row[const.DATA_DUTY_ASSIGNEE_ID] in participants
        ]
        mentions = " ".join(f"@{name}" for name in names)
        body = const.DUTY_ENTRY_BODY.format(mentions=mentions)

        iso_date = duty_date.isoformat()
        entry = self._find_duty_entry(iso_date)
        if entry is not None:
            if (
                entry.get(const.DATA_ENTRY_TARGET_PARTICIPANT_ID) == primary_id
                and entry.get(const.DATA_ENTRY_BODY) == body
            ):
                return entry
            entry["target_participant_id"] = primary_id
            entry["body"] = body
            entry["updated_at"] = dt_now_iso()
            await self.coordinator.async_persist_and_update()

            const.LOGGER.debug(
                "DutyManager.get_or_create_duty_entry: refreshed %s for %s",
                entry["internal_id"],
                iso_date,
            )
            self.emit(
                const.SIGNAL_SUFFIX_ENTRY_UPDATED, entry_id=entry["internal_id"]
            )
            return entry

        entry = self.coordinator.entry_manager.build_entry(
            primary_id,
            duty_date,
            {
                const.DATA_ENTRY_CATEGORY: const.DUTY_ENTRY_CATEGORY,
                const.DATA_ENTRY_TITLE: const.DUTY_ENTRY_TITLE,
                const.DATA_ENTRY_BODY: body,
            },
            entry_type=EntryType.DUTY,
            target_participant_id=primary_id,
        )
        self.store.insert_entry(entry)
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Created duty entry %s for %s", entry["internal_id"], iso_date
        )
        self.emit(
            const.SIGNAL_SUFFIX_ENTRY_CREATED,
            entry_ids=[entry["internal_id"]],
            recurrence_group_id=None,
        )
        return entry

    async def get_duty_entry_for_participant(
        self, duty_date: date, participant_id: str
    ) -> EntryData | None:
        """Return the duty entry only when the participant is on duty that day."""
        if not any(
            row[const.DATA_DUTY_ASSIGNEE_ID] == participant_id
            for row in self.get_assignees(duty_date)
        ):
            return None
        return await self.get_or_create_duty_entry(duty_date)
