# File: store.py
"""Handles persistent data storage for the StaffBoard integration.

Uses Home Assistant's Storage helper to save and load board data, ensuring the
state is preserved across restarts. This includes participants, entries,
engagement statuses, action records, the point ledger, duty assignments, and
recurrence groups.

Every record operation below is synchronous and runs on the event loop, so a
check and the write that follows it can never interleave with another task.
Persistence to disk happens once per operation through ``async_save``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .utils.dt_utils import dt_now_iso

if TYPE_CHECKING:
    from collections.abc import Iterable

    from homeassistant.core import HomeAssistant

    from .type_defs import (
        ActionRecord,
        DutyAssignmentData,
        EngagementRecord,
        EntryData,
        LedgerEntry,
        ParticipantData,
        RecurrenceGroupData,
    )


def engagement_key(entry_id: str, participant_id: str) -> str:
    """Return the unique key of an engagement row."""
    return f"{entry_id}:{participant_id}"


def action_record_key(entry_id: str, participant_id: str, action_type: str) -> str:
    """Return the unique key of an ActionRecord."""
    return f"{entry_id}:{participant_id}:{action_type}"


def duty_key(duty_date: str, slot: int) -> str:
    """Return the unique key of a duty assignment."""
    return f"{duty_date}:{slot}"


class StaffBoardStore:
    """Handles persistent storage operations for StaffBoard data.

    Thin wrapper around Home Assistant's Store API plus the record-level
    operations the managers need. Utilizes internal_id as the primary key for
    participants, entries, and recurrence groups.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations."""
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION_CURRENT,
            },
            const.DATA_PARTICIPANTS: {},
            const.DATA_ENTRIES: {},
            const.DATA_ENGAGEMENT: {},
            const.DATA_ACTION_RECORDS: {},
            const.DATA_LEDGER: [],
            const.DATA_DUTY_ASSIGNMENTS: {},
            const.DATA_RECURRENCE_GROUPS: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Buckets missing
        from older files are added.
        """
        const.LOGGER.debug("DEBUG: StaffBoardStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = StaffBoardStore.get_default_structure()
            return

        self._data = existing_data
        for key, default in StaffBoardStore.get_default_structure().items():
            self._data.setdefault(key, default)

        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "participants": len(self._data[const.DATA_PARTICIPANTS]),
                "entries": len(self._data[const.DATA_ENTRIES]),
                "ledger": len(self._data[const.DATA_LEDGER]),
                "duty_assignments": len(self._data[const.DATA_DUTY_ASSIGNMENTS]),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    async def async_save(self) -> None:
        """Save the current data to storage.

        Raises:
            HomeAssistantError: When the write fails. The failure is logged and
                surfaced to the caller; in-memory changes are not rolled back.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except (OSError, TypeError, ValueError) as err:
            const.LOGGER.error("ERROR: Failed to save data to storage: %s", err)
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_STORAGE_WRITE_FAILED,
                translation_placeholders={"error": str(err)},
            ) from err

    async def async_clear_data(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning("WARNING: Clearing all StaffBoard data and resetting storage")
        self._data = StaffBoardStore.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        await self._store.async_remove()
        self._data = {}
        const.LOGGER.info("INFO: Storage file removed: %s", self._storage_key)

    # -------------------------------------------------------------------------------------
    # Buckets
    # -------------------------------------------------------------------------------------

    @property
    def participants(self) -> dict[str, ParticipantData]:
        """Return the participants bucket."""
        return self._data[const.DATA_PARTICIPANTS]

    @property
    def entries(self) -> dict[str, EntryData]:
        """Return the entries bucket."""
        return self._data[const.DATA_ENTRIES]

    @property
    def ledger(self) -> list[LedgerEntry]:
        """Return the append-only ledger."""
        return self._data[const.DATA_LEDGER]

    @property
    def duty_assignments(self) -> dict[str, DutyAssignmentData]:
        """Return the duty assignment bucket."""
        return self._data[const.DATA_DUTY_ASSIGNMENTS]

    @property
    def recurrence_groups(self) -> dict[str, RecurrenceGroupData]:
        """Return the recurrence group bucket."""
        return self._data[const.DATA_RECURRENCE_GROUPS]

    # -------------------------------------------------------------------------------------
    # Engagement
    # -------------------------------------------------------------------------------------

    def get_engagement_status(self, entry_id: str, participant_id: str) -> str:
        """Return a participant's status for an entry (UNREAD when absent)."""
        row = self._data[const.DATA_ENGAGEMENT].get(
            engagement_key(entry_id, participant_id)
        )
        if not row:
            return const.EngagementStatus.UNREAD
        return row[const.DATA_ENGAGEMENT_STATUS]

    def upsert_engagement_status(
        self, entry_id: str, participant_id: str, status: str
    ) -> EngagementRecord:
        """Create or replace the single status row for (entry, participant)."""
        row: EngagementRecord = {
            "entry_id": entry_id,
            "participant_id": participant_id,
            "status": str(status),
            "updated_at": dt_now_iso(),
        }
        self._data[const.DATA_ENGAGEMENT][engagement_key(entry_id, participant_id)] = (
            row
        )
        return row

    def list_non_unread_statuses(self, entry_id: str) -> list[str]:
        """Return every non-UNREAD participant status recorded for an entry."""
        return [
            row[const.DATA_ENGAGEMENT_STATUS]
            for row in self._data[const.DATA_ENGAGEMENT].values()
            if row[const.DATA_ENGAGEMENT_ENTRY_ID] == entry_id
            and row[const.DATA_ENGAGEMENT_STATUS] != const.EngagementStatus.UNREAD
        ]

    def get_action_record(
        self, entry_id: str, participant_id: str, action_type: str
    ) -> ActionRecord | None:
        """Return the ActionRecord for the triple, if any."""
        return self._data[const.DATA_ACTION_RECORDS].get(
            action_record_key(entry_id, participant_id, action_type)
        )

    def insert_action_record(
        self,
        entry_id: str,
        participant_id: str,
        action_type: str,
        points_awarded: int,
    ) -> bool:
        """Insert an ActionRecord unless one already exists (insert-or-ignore).

        Returns:
            True when the record was inserted, False when the key was taken.
        """
        records = self._data[const.DATA_ACTION_RECORDS]
        key = action_record_key(entry_id, participant_id, action_type)
        if key in records:
            return False
        records[key] = {
            "entry_id": entry_id,
            "participant_id": participant_id,
            "action_type": str(action_type),
            "points_awarded": int(points_awarded),
            "created_at": dt_now_iso(),
        }
        return True

    def delete_action_record(
        self, entry_id: str, participant_id: str, action_type: str
    ) -> ActionRecord | None:
        """Delete and return the ActionRecord for the triple, if any."""
        return self._data[const.DATA_ACTION_RECORDS].pop(
            action_record_key(entry_id, participant_id, action_type), None
        )

    # -------------------------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------------------------

    def append_ledger_entry(self, entry: LedgerEntry) -> None:
        """Append a row to the ledger. Rows are never edited afterwards."""
        self._data[const.DATA_LEDGER].append(entry)

    def increment_participant_balance(self, participant_id: str, delta: int) -> int:
        """Add ``delta`` to the cached balance and return the new value."""
        participant = self.participants[participant_id]
        participant["points"] = int(participant.get("points", 0)) + int(delta)
        return participant["points"]

    # -------------------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------------------

    def update_entry_aggregate(
        self,
        entry_id: str,
        status: str,
        resolver_id: str | None = None,
        resolved_at: str | None = None,
    ) -> None:
        """Write the entry-level aggregate status and resolver fields."""
        entry = self.entries[entry_id]
        entry["status"] = str(status)
        entry["solved_by"] = resolver_id
        entry["solved_at"] = resolved_at

    def insert_entry(self, entry: EntryData) -> None:
        """Insert a single entry keyed by its internal_id."""
        self.entries[entry["internal_id"]] = entry

    def bulk_insert_entries(self, entries: Iterable[EntryData]) -> list[str]:
        """Insert many entries and return their ids in insertion order."""
        ids: list[str] = []
        for entry in entries:
            self.insert_entry(entry)
            ids.append(entry["internal_id"])
        return ids

    def remove_entries(self, entry_ids: Iterable[str]) -> set[str]:
        """Remove entries and their replies with engagement rows and ActionRecords.

        Ledger rows referencing the entries are kept.

        Returns:
            Ids of every entry removed, replies included.
        """
        doomed = {entry_id for entry_id in entry_ids if entry_id in self.entries}
        if not doomed:
            return set()

        replies = [
            reply_id
            for reply_id, entry in self.entries.items()
            if entry.get(const.DATA_ENTRY_PARENT_ID) in doomed
        ]
        doomed.update(replies)
        for entry_id in doomed:
            del self.entries[entry_id]

        for bucket, id_field in (
            (const.DATA_ENGAGEMENT, const.DATA_ENGAGEMENT_ENTRY_ID),
            (const.DATA_ACTION_RECORDS, const.DATA_ACTION_ENTRY_ID),
        ):
            rows = self._data[bucket]
            for key in [k for k, row in rows.items() if row[id_field] in doomed]:
                del rows[key]

        return doomed

    # -------------------------------------------------------------------------------------
    # Duty assignments
    # -------------------------------------------------------------------------------------

    def upsert_duty_assignment(
        self,
        duty_date: str,
        slot: int,
        assignee_id: str,
        updated_by: str | None = None,
    ) -> None:
        """Create or overwrite the assignee for (date, slot). Last write wins."""
        self.duty_assignments[duty_key(duty_date, slot)] = {
            "duty_date": duty_date,
            "slot": int(slot),
            "assignee_id": assignee_id,
            "updated_by": updated_by,
            "updated_at": dt_now_iso(),
        }

    def delete_duty_assignment(self, duty_date: str, slot: int) -> bool:
        """Delete the assignment for (date, slot). Returns True if one existed."""
        return self.duty_assignments.pop(duty_key(duty_date, slot), None) is not None
