# File: const.py
"""Constants for the StaffBoard integration.

This file centralizes storage keys, service names, field names, point tariffs,
signal suffixes, and translation keys for consistency across the integration.
"""

import logging
from enum import StrEnum

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
STAFFBOARD_TITLE = "StaffBoard"

# Integration Domain
DOMAIN = "staffboard"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.CALENDAR,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_KEY = "staffboard_data"
STORAGE_VERSION = 1
SCHEMA_VERSION_CURRENT = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_BOARD_NAME = "board_name"
CONF_POINTS_LABEL = "points_label"
CONF_POINTS_ICON = "points_icon"

DEFAULT_BOARD_NAME = "Staff Board"
DEFAULT_POINTS_LABEL = "Points"
DEFAULT_POINTS_ICON = "mdi:star-circle"

# Config / options flow
CONFIG_FLOW_STEP_USER = "user"
CONFIG_FLOW_STEP_POINTS = "points"
OPTIONS_FLOW_STEP_INIT = "init"
CFOP_ERROR_BOARD_NAME_REQUIRED = "board_name_required"
CFOP_ERROR_POINTS_LABEL_REQUIRED = "points_label_required"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

# ------------------------------------------------------------------------------------------------
# Enumerations
# ------------------------------------------------------------------------------------------------


class EngagementStatus(StrEnum):
    """Per-participant engagement with an entry, and the entry aggregate."""

    UNREAD = "UNREAD"
    CONFIRMED = "CONFIRMED"
    WORKING = "WORKING"
    SOLVED = "SOLVED"


class ParticipantLifecycle(StrEnum):
    """Lifecycle of a participant record."""

    ACTIVE = "active"
    HIDDEN = "hidden"
    DELETED = "deleted"


class EntryVisibility(StrEnum):
    """Soft-hide / soft-delete state of an entry."""

    VISIBLE = "visible"
    HIDDEN = "hidden"
    DELETED = "deleted"


class EntryType(StrEnum):
    """Kind of board entry."""

    STANDARD = "standard"
    DUTY = "duty"


class RecurrenceKind(StrEnum):
    """Recurrence rule variants."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM_INTERVAL = "custom_interval"
    CUSTOM_ORDINAL_WEEKDAY = "custom_ordinal_weekday"


class IntervalUnit(StrEnum):
    """Units for the custom interval rule."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


# Actions a participant may toggle (UNREAD is the "off" state, never an action)
ENGAGEMENT_ACTIONS = (
    EngagementStatus.CONFIRMED,
    EngagementStatus.WORKING,
    EngagementStatus.SOLVED,
)

# Precedence used when recomputing an aggregate from remaining statuses
AGGREGATE_PRECEDENCE = (
    EngagementStatus.WORKING,
    EngagementStatus.CONFIRMED,
)

# ------------------------------------------------------------------------------------------------
# Points
# ------------------------------------------------------------------------------------------------
POINTS_CONFIRMED = 1
POINTS_WORKING = 5
POINTS_SOLVED = 10
POINTS_REPLY = 3
POINTS_POST = 2

POINT_TARIFF: dict[str, int] = {
    EngagementStatus.CONFIRMED: POINTS_CONFIRMED,
    EngagementStatus.WORKING: POINTS_WORKING,
    EngagementStatus.SOLVED: POINTS_SOLVED,
}

# Ledger reasons
POINTS_REASON_CONFIRMED = "CONFIRMED"
POINTS_REASON_WORKING = "WORKING"
POINTS_REASON_SOLVED = "SOLVED"
POINTS_REASON_REPLY = "REPLY"
POINTS_REASON_POST = "POST"
POINTS_REASON_REVERSAL_SUFFIX = "_CANCEL"

DEFAULT_LEDGER_HISTORY_LIMIT = 50

# ------------------------------------------------------------------------------------------------
# Recurrence
# ------------------------------------------------------------------------------------------------
# Weekdays are numbered 0=Sunday .. 6=Saturday
WEEKDAY_SUNDAY = 0
WEEKDAY_SATURDAY = 6
WEEKS_OF_MONTH_MIN = 1
WEEKS_OF_MONTH_MAX = 5

# Internal safety cap; generation stops silently
MAX_GENERATED_DATES = 1000

# Business cap for one bulk authoring action
MAX_BULK_OCCURRENCES = 100

# Largest custom interval step accepted by the services
MAX_RECURRENCE_INTERVAL = 365

# Duty roster
DUTY_SLOT_DEFAULT = 1
DUTY_MAX_SLOTS = 2

# Board entry addressed to the people on duty for a date
DUTY_ENTRY_CATEGORY = "duty"
DUTY_ENTRY_TITLE = "You are on duty today"
DUTY_ENTRY_BODY = "{mentions} on duty today. Press SOLVED once the duty is done."

# ------------------------------------------------------------------------------------------------
# Storage Buckets and Fields
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"

DATA_PARTICIPANTS = "participants"
DATA_ENTRIES = "entries"
DATA_ENGAGEMENT = "engagement"
DATA_ACTION_RECORDS = "action_records"
DATA_LEDGER = "ledger"
DATA_DUTY_ASSIGNMENTS = "duty_assignments"
DATA_RECURRENCE_GROUPS = "recurrence_groups"

# Shared
DATA_INTERNAL_ID = "internal_id"
DATA_CREATED_AT = "created_at"
DATA_UPDATED_AT = "updated_at"
DATA_UPDATED_BY = "updated_by"

# Participants
DATA_PARTICIPANT_NAME = "name"
DATA_PARTICIPANT_HA_USER_ID = "ha_user_id"
DATA_PARTICIPANT_IS_ADMIN = "is_admin"
DATA_PARTICIPANT_LIFECYCLE = "lifecycle"
DATA_PARTICIPANT_POINTS = "points"
# Legacy flags migrated into lifecycle on load
DATA_PARTICIPANT_LEGACY_IS_HIDDEN = "is_hidden"
DATA_PARTICIPANT_LEGACY_IS_DELETED = "is_deleted"

# Entries
DATA_ENTRY_AUTHOR_ID = "author_id"
DATA_ENTRY_CATEGORY = "category"
DATA_ENTRY_TITLE = "title"
DATA_ENTRY_BODY = "body"
DATA_ENTRY_TARGET_DATE = "target_date"
DATA_ENTRY_IS_URGENT = "is_urgent"
DATA_ENTRY_DEADLINE = "deadline"
DATA_ENTRY_BOUNTY_POINTS = "bounty_points"
DATA_ENTRY_STATUS = "status"
DATA_ENTRY_SOLVED_BY = "solved_by"
DATA_ENTRY_SOLVED_AT = "solved_at"
DATA_ENTRY_RECURRENCE_GROUP_ID = "recurrence_group_id"
DATA_ENTRY_PARENT_ID = "parent_id"
DATA_ENTRY_VISIBILITY = "visibility"
DATA_ENTRY_TYPE = "entry_type"
DATA_ENTRY_TARGET_PARTICIPANT_ID = "target_participant_id"

# Entry fields an author may edit after creation
ENTRY_EDITABLE_FIELDS = (
    DATA_ENTRY_CATEGORY,
    DATA_ENTRY_TITLE,
    DATA_ENTRY_BODY,
    DATA_ENTRY_IS_URGENT,
    DATA_ENTRY_DEADLINE,
    DATA_ENTRY_BOUNTY_POINTS,
)

# Engagement rows
DATA_ENGAGEMENT_ENTRY_ID = "entry_id"
DATA_ENGAGEMENT_PARTICIPANT_ID = "participant_id"
DATA_ENGAGEMENT_STATUS = "status"

# Action records
DATA_ACTION_ENTRY_ID = "entry_id"
DATA_ACTION_PARTICIPANT_ID = "participant_id"
DATA_ACTION_TYPE = "action_type"
DATA_ACTION_POINTS_AWARDED = "points_awarded"

# Ledger
DATA_LEDGER_ID = "ledger_id"
DATA_LEDGER_PARTICIPANT_ID = "participant_id"
DATA_LEDGER_AMOUNT = "amount"
DATA_LEDGER_REASON = "reason"
DATA_LEDGER_ENTRY_ID = "entry_id"
DATA_LEDGER_TIMESTAMP = "timestamp"
DATA_LEDGER_BALANCE_AFTER = "balance_after"

# Duty assignments
DATA_DUTY_DATE = "duty_date"
DATA_DUTY_SLOT = "slot"
DATA_DUTY_ASSIGNEE_ID = "assignee_id"

# Recurrence groups
DATA_GROUP_AUTHOR_ID = "author_id"
DATA_GROUP_KIND = "kind"
DATA_GROUP_START_DATE = "start_date"
DATA_GROUP_END_DATE = "end_date"
DATA_GROUP_IS_ACTIVE = "is_active"
DATA_GROUP_RECURRENCE_CONFIG = "recurrence_config"

# ------------------------------------------------------------------------------------------------
# Signals (instance-scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_POINTS_CHANGED = "points_changed"
SIGNAL_SUFFIX_ENGAGEMENT_TOGGLED = "engagement_toggled"
SIGNAL_SUFFIX_ENTRY_CREATED = "entry_created"
SIGNAL_SUFFIX_ENTRY_UPDATED = "entry_updated"
SIGNAL_SUFFIX_DUTY_UPDATED = "duty_updated"
SIGNAL_SUFFIX_PARTICIPANT_ADDED = "participant_added"
SIGNAL_SUFFIX_PARTICIPANT_UPDATED = "participant_updated"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_TOGGLE_ENGAGEMENT = "toggle_engagement"
SERVICE_CREATE_ENTRY = "create_entry"
SERVICE_CREATE_REPLY = "create_reply"
SERVICE_UPDATE_ENTRY = "update_entry"
SERVICE_DELETE_ENTRY = "delete_entry"
SERVICE_SET_ENTRY_HIDDEN = "set_entry_hidden"
SERVICE_UPDATE_RECURRENCE_GROUP = "update_recurrence_group"
SERVICE_DELETE_RECURRENCE_GROUP = "delete_recurrence_group"
SERVICE_APPLY_DUTY_RECURRENCE = "apply_duty_recurrence"
SERVICE_SET_DUTY_ASSIGNMENT = "set_duty_assignment"
SERVICE_CLEAR_DUTY_ASSIGNMENT = "clear_duty_assignment"
SERVICE_ADD_PARTICIPANT = "add_participant"
SERVICE_SET_PARTICIPANT_LIFECYCLE = "set_participant_lifecycle"
SERVICE_SET_PARTICIPANT_ADMIN = "set_participant_admin"
SERVICE_REBUILD_POINTS = "rebuild_points"
SERVICE_GET_BOARD = "get_board"
SERVICE_GET_DUTY_ROSTER = "get_duty_roster"

# Service fields
FIELD_PARTICIPANT_NAME = "participant_name"
FIELD_ACTING_AS = "acting_as"
FIELD_ENTRY_ID = "entry_id"
FIELD_ACTION = "action"
FIELD_CATEGORY = "category"
FIELD_TITLE = "title"
FIELD_BODY = "body"
FIELD_TARGET_DATE = "target_date"
FIELD_IS_URGENT = "is_urgent"
FIELD_DEADLINE = "deadline"
FIELD_BOUNTY_POINTS = "bounty_points"
FIELD_HIDDEN = "hidden"
FIELD_GROUP_ID = "group_id"
FIELD_IS_ACTIVE = "is_active"
FIELD_ASSIGNEE_NAME = "assignee_name"
FIELD_DUTY_DATE = "duty_date"
FIELD_SLOT = "slot"
FIELD_HA_USER_ID = "ha_user_id"
FIELD_IS_ADMIN = "is_admin"
FIELD_LIFECYCLE = "lifecycle"
FIELD_INCLUDE_HIDDEN = "include_hidden"

# Recurrence fields (shared by create_entry and apply_duty_recurrence)
FIELD_START_DATE = "start_date"
FIELD_RECURRENCE = "recurrence"
FIELD_END_DATE = "end_date"
FIELD_WEEKDAYS = "weekdays"
FIELD_WEEKS_OF_MONTH = "weeks_of_month"
FIELD_INTERVAL = "interval"
FIELD_INTERVAL_UNIT = "interval_unit"

# Value meaning "no assignee" in apply_duty_recurrence (clear mode)
DUTY_ASSIGNEE_NONE = "none"

# ------------------------------------------------------------------------------------------------
# Translation Keys (exceptions section of translations/en.json)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_NOT_FOUND = "not_found"
TRANS_KEY_ERROR_NOT_PERMITTED = "not_permitted"
TRANS_KEY_ERROR_INVALID_ACTION = "invalid_action"
TRANS_KEY_ERROR_INVALID_DATE_RANGE = "invalid_date_range"
TRANS_KEY_ERROR_EMPTY_WEEKDAYS = "empty_weekdays"
TRANS_KEY_ERROR_EMPTY_ORDINAL_SELECTION = "empty_ordinal_selection"
TRANS_KEY_ERROR_TOO_MANY_OCCURRENCES = "too_many_occurrences"
TRANS_KEY_ERROR_NO_OCCURRENCES = "no_occurrences"
TRANS_KEY_ERROR_INVALID_RECURRENCE = "invalid_recurrence"
TRANS_KEY_ERROR_INVALID_SLOT = "invalid_slot"
TRANS_KEY_ERROR_DUPLICATE_PARTICIPANT = "duplicate_participant"
TRANS_KEY_ERROR_LAST_ADMIN = "last_admin"
TRANS_KEY_ERROR_STORAGE_WRITE_FAILED = "storage_write_failed"
TRANS_KEY_ERROR_NO_ENTRY_LOADED = "no_entry_loaded"
TRANS_KEY_ERROR_UNEXPECTED = "unexpected_error"

# Entity types for placeholders
LABEL_ENTRY = "entry"
LABEL_PARTICIPANT = "participant"
LABEL_RECURRENCE_GROUP = "recurrence_group"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_KEY_PARTICIPANT_POINTS = "participant_points"
TRANS_KEY_SENSOR_PARTICIPANT_POINTS = "participant_points"
ATTR_PARTICIPANT_NAME = "participant_name"
ATTR_LIFECYCLE = "lifecycle"
ATTR_RECENT_LEDGER = "recent_ledger"
SENSOR_RECENT_LEDGER_LIMIT = 5

# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------
CALENDAR_KEY_DUTY_ROSTER = "duty_roster"
TRANS_KEY_CALENDAR_DUTY_ROSTER = "duty_roster"
ATTR_DUTY_ASSIGNEES = "assignees"
