"""Type definitions for StaffBoard data structures.

TypedDict is used for records whose keys are fixed at design time (participants,
entries, engagement rows, ledger rows). Buckets keyed by runtime ids stay
``dict[str, ...]``.

IMPORTANT: This file must NOT import from coordinator.py or any manager to avoid
circular dependencies. Only import from typing.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (``.get()`` defaults,
None handling) remain in the store and managers.
"""

from typing import Any, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ParticipantId = str  # UUID string
EntryId = str  # UUID string
RecurrenceGroupId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Stored Records
# =============================================================================


class ParticipantData(TypedDict):
    """A staff member who can author entries and toggle engagement."""

    internal_id: ParticipantId
    name: str
    ha_user_id: str | None
    is_admin: bool
    lifecycle: str  # ParticipantLifecycle value
    points: int
    created_at: ISODatetime


class EntryData(TypedDict):
    """A dated board entry (or a reply when parent_id is set)."""

    internal_id: EntryId
    author_id: ParticipantId
    category: str | None
    title: str | None
    body: str
    target_date: ISODate
    is_urgent: bool
    deadline: ISODate | None
    bounty_points: int
    status: str  # EngagementStatus value (aggregate)
    solved_by: ParticipantId | None
    solved_at: ISODatetime | None
    recurrence_group_id: RecurrenceGroupId | None
    parent_id: EntryId | None
    visibility: str  # EntryVisibility value
    entry_type: str  # EntryType value
    target_participant_id: ParticipantId | None  # primary assignee of a duty entry
    created_at: ISODatetime
    updated_at: ISODatetime | None
    updated_by: ParticipantId | None


class EngagementRecord(TypedDict):
    """Per-(entry, participant) engagement status row."""

    entry_id: EntryId
    participant_id: ParticipantId
    status: str  # EngagementStatus value
    updated_at: ISODatetime


class ActionRecord(TypedDict):
    """Proof that a (participant, entry, action) triple has been paid."""

    entry_id: EntryId
    participant_id: ParticipantId
    action_type: str
    points_awarded: int
    created_at: ISODatetime


class LedgerEntry(TypedDict):
    """A single immutable row in the point ledger.

    Created by: LedgerEngine.create_ledger_entry()
    Stored in: data["ledger"] (append-only list)
    Managed by: EconomyManager
    """

    ledger_id: str
    participant_id: ParticipantId
    amount: int  # Signed delta (positive=award, negative=reversal)
    reason: str
    entry_id: EntryId | None
    timestamp: ISODatetime
    balance_after: int


class DutyAssignmentData(TypedDict):
    """Who is on duty for a given date and slot."""

    duty_date: ISODate
    slot: int
    assignee_id: ParticipantId
    updated_by: ParticipantId | None
    updated_at: ISODatetime


class RecurrenceGroupData(TypedDict):
    """Metadata shared by the entries of one recurring authoring action."""

    internal_id: RecurrenceGroupId
    author_id: ParticipantId
    kind: str  # RecurrenceKind value
    recurrence_config: dict[str, Any]  # rule_from_config mapping
    start_date: ISODate
    end_date: ISODate
    is_active: bool
    created_at: ISODatetime
    updated_at: ISODatetime | None


# =============================================================================
# Collection Aliases
# =============================================================================

ParticipantsCollection = dict[ParticipantId, ParticipantData]
EntriesCollection = dict[EntryId, EntryData]
StorageData = dict[str, Any]
