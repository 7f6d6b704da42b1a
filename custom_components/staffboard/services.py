# File: services.py
"""Defines custom services for the StaffBoard integration.

These services allow direct actions through scripts, automations, and the
board frontend. Every handler resolves the acting participant from the calling
Home Assistant user (or ``acting_as``) and delegates to a manager.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import (
    HomeAssistantError,
    ServiceValidationError,
    Unauthorized,
)
from homeassistant.helpers import config_validation as cv

from . import const
from .const import EngagementStatus, ParticipantLifecycle, RecurrenceKind
from .engines.recurrence_engine import (
    InvalidRecurrenceConfigError,
    RecurrenceEngine,
    RecurrenceRule,
)
from .helpers.auth_helpers import (
    get_staffboard_coordinator,
    is_ha_admin,
    resolve_acting_participant,
)
from .helpers.entity_helpers import get_participant_id_by_name
from .utils.dt_utils import dt_today_local

# --- Shared field groups ---
RECURRENCE_PATTERN_FIELDS = {
    vol.Optional(const.FIELD_WEEKDAYS): vol.All(
        cv.ensure_list,
        [vol.All(vol.Coerce(int), vol.Range(const.WEEKDAY_SUNDAY, const.WEEKDAY_SATURDAY))],
    ),
    vol.Optional(const.FIELD_WEEKS_OF_MONTH): vol.All(
        cv.ensure_list,
        [
            vol.All(
                vol.Coerce(int),
                vol.Range(const.WEEKS_OF_MONTH_MIN, const.WEEKS_OF_MONTH_MAX),
            )
        ],
    ),
    vol.Optional(const.FIELD_INTERVAL): vol.All(
        vol.Coerce(int), vol.Range(min=1, max=const.MAX_RECURRENCE_INTERVAL)
    ),
    vol.Optional(const.FIELD_INTERVAL_UNIT): cv.string,
}

RECURRENCE_FIELDS = {
    vol.Optional(const.FIELD_RECURRENCE, default=RecurrenceKind.NONE.value): vol.In(
        [kind.value for kind in RecurrenceKind]
    ),
    vol.Optional(const.FIELD_END_DATE): cv.date,
    **RECURRENCE_PATTERN_FIELDS,
}

ACTING_AS_FIELD = {vol.Optional(const.FIELD_ACTING_AS): cv.string}

# --- Service Schemas ---
TOGGLE_ENGAGEMENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENTRY_ID): cv.string,
        vol.Required(const.FIELD_ACTION): vol.In(
            [action.value for action in const.ENGAGEMENT_ACTIONS]
        ),
        **ACTING_AS_FIELD,
    }
)

CREATE_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_BODY, default=""): cv.string,
        vol.Optional(const.FIELD_CATEGORY): cv.string,
        vol.Optional(const.FIELD_TARGET_DATE): cv.date,
        vol.Optional(const.FIELD_IS_URGENT, default=False): cv.boolean,
        vol.Optional(const.FIELD_DEADLINE): vol.Any(cv.date, None),
        vol.Optional(const.FIELD_BOUNTY_POINTS, default=0): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        **RECURRENCE_FIELDS,
        **ACTING_AS_FIELD,
    }
)

CREATE_REPLY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENTRY_ID): cv.string,
        vol.Required(const.FIELD_BODY): cv.string,
        **ACTING_AS_FIELD,
    }
)

UPDATE_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENTRY_ID): cv.string,
        vol.Optional(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_BODY): cv.string,
        vol.Optional(const.FIELD_CATEGORY): vol.Any(cv.string, None),
        vol.Optional(const.FIELD_IS_URGENT): cv.boolean,
        vol.Optional(const.FIELD_DEADLINE): vol.Any(cv.date, None),
        vol.Optional(const.FIELD_BOUNTY_POINTS): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        **ACTING_AS_FIELD,
    }
)

DELETE_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENTRY_ID): cv.string,
        **ACTING_AS_FIELD,
    }
)

SET_ENTRY_HIDDEN_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ENTRY_ID): cv.string,
        vol.Required(const.FIELD_HIDDEN): cv.boolean,
        **ACTING_AS_FIELD,
    }
)

UPDATE_RECURRENCE_GROUP_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_GROUP_ID): cv.string,
        vol.Optional(const.FIELD_END_DATE): cv.date,
        vol.Optional(const.FIELD_IS_ACTIVE): cv.boolean,
        vol.Optional(const.FIELD_RECURRENCE): vol.In(
            [kind.value for kind in RecurrenceKind if kind != RecurrenceKind.NONE]
        ),
        **RECURRENCE_PATTERN_FIELDS,
        **ACTING_AS_FIELD,
    }
)

DELETE_RECURRENCE_GROUP_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_GROUP_ID): cv.string,
        **ACTING_AS_FIELD,
    }
)

APPLY_DUTY_RECURRENCE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_START_DATE): cv.date,
        vol.Required(const.FIELD_ASSIGNEE_NAME): cv.string,
        vol.Optional(const.FIELD_SLOT, default=const.DUTY_SLOT_DEFAULT): vol.Coerce(
            int
        ),
        **RECURRENCE_FIELDS,
        **ACTING_AS_FIELD,
    }
)

SET_DUTY_ASSIGNMENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DUTY_DATE): cv.date,
        vol.Required(const.FIELD_ASSIGNEE_NAME): cv.string,
        vol.Optional(const.FIELD_SLOT, default=const.DUTY_SLOT_DEFAULT): vol.Coerce(
            int
        ),
        **ACTING_AS_FIELD,
    }
)

CLEAR_DUTY_ASSIGNMENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DUTY_DATE): cv.date,
        vol.Optional(const.FIELD_SLOT, default=const.DUTY_SLOT_DEFAULT): vol.Coerce(
            int
        ),
        **ACTING_AS_FIELD,
    }
)

ADD_PARTICIPANT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PARTICIPANT_NAME): cv.string,
        vol.Optional(const.FIELD_HA_USER_ID): cv.string,
        vol.Optional(const.FIELD_IS_ADMIN, default=False): cv.boolean,
    }
)

SET_PARTICIPANT_LIFECYCLE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PARTICIPANT_NAME): cv.string,
        vol.Required(const.FIELD_LIFECYCLE): vol.In(
            [lifecycle.value for lifecycle in ParticipantLifecycle]
        ),
    }
)

SET_PARTICIPANT_ADMIN_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_PARTICIPANT_NAME): cv.string,
        vol.Required(const.FIELD_IS_ADMIN): cv.boolean,
    }
)

REBUILD_POINTS_SCHEMA = vol.Schema({})

GET_BOARD_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_TARGET_DATE): cv.date,
        vol.Optional(const.FIELD_INCLUDE_HIDDEN, default=False): cv.boolean,
        **ACTING_AS_FIELD,
    }
)

GET_DUTY_ROSTER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_START_DATE): cv.date,
        vol.Optional(const.FIELD_END_DATE): cv.date,
    }
)

# Recurrence keys forwarded when a group's frequency changes
_RECURRENCE_CONFIG_FIELDS = (
    const.FIELD_RECURRENCE,
    const.FIELD_WEEKDAYS,
    const.FIELD_WEEKS_OF_MONTH,
    const.FIELD_INTERVAL,
    const.FIELD_INTERVAL_UNIT,
)

# Service name -> entry field name for editable entry fields
_ENTRY_FIELD_MAP = {
    const.FIELD_CATEGORY: const.DATA_ENTRY_CATEGORY,
    const.FIELD_TITLE: const.DATA_ENTRY_TITLE,
    const.FIELD_BODY: const.DATA_ENTRY_BODY,
    const.FIELD_IS_URGENT: const.DATA_ENTRY_IS_URGENT,
    const.FIELD_DEADLINE: const.DATA_ENTRY_DEADLINE,
    const.FIELD_BOUNTY_POINTS: const.DATA_ENTRY_BOUNTY_POINTS,
}

_ALL_SERVICES = (
    const.SERVICE_TOGGLE_ENGAGEMENT,
    const.SERVICE_CREATE_ENTRY,
    const.SERVICE_CREATE_REPLY,
    const.SERVICE_UPDATE_ENTRY,
    const.SERVICE_DELETE_ENTRY,
    const.SERVICE_SET_ENTRY_HIDDEN,
    const.SERVICE_UPDATE_RECURRENCE_GROUP,
    const.SERVICE_DELETE_RECURRENCE_GROUP,
    const.SERVICE_APPLY_DUTY_RECURRENCE,
    const.SERVICE_SET_DUTY_ASSIGNMENT,
    const.SERVICE_CLEAR_DUTY_ASSIGNMENT,
    const.SERVICE_ADD_PARTICIPANT,
    const.SERVICE_SET_PARTICIPANT_LIFECYCLE,
    const.SERVICE_SET_PARTICIPANT_ADMIN,
    const.SERVICE_REBUILD_POINTS,
    const.SERVICE_GET_BOARD,
    const.SERVICE_GET_DUTY_ROSTER,
)


def _build_rule(data: dict[str, Any]) -> RecurrenceRule | None:
    """Turn the recurrence fields of a call into a rule (None = single date)."""
    try:
        return RecurrenceEngine.rule_from_config(data)
    except InvalidRecurrenceConfigError as err:
        raise ServiceValidationError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_INVALID_RECURRENCE,
            translation_placeholders={
                "field": err.field_name,
                "value": str(err.value),
            },
        ) from err


def _lookup_participant(coordinator, name: str) -> str:
    """Return a participant id by name or raise not_found."""
    participant_id = get_participant_id_by_name(coordinator, name)
    if not participant_id:
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
            translation_placeholders={
                "item_type": const.LABEL_PARTICIPANT,
                "item_id": name,
            },
        )
    return participant_id


def async_setup_services(hass: HomeAssistant) -> None:
    """Register StaffBoard services."""

    async def _async_actor(call: ServiceCall, coordinator) -> str | None:
        """Resolve the participant the call acts for."""
        return await resolve_acting_participant(
            hass,
            coordinator,
            call.context.user_id,
            call.data.get(const.FIELD_ACTING_AS),
        )

    async def _async_require_ha_admin(call: ServiceCall) -> None:
        """Allow system calls and HA administrators only."""
        user_id = call.context.user_id
        if user_id and not await is_ha_admin(hass, user_id):
            const.LOGGER.warning(
                "WARNING: %s: user '%s' is not an administrator", call.service, user_id
            )
            raise Unauthorized(context=call.context, user_id=user_id)

    async def _async_guarded(call: ServiceCall, operation):
        """Run a manager operation, wrapping unexpected failures."""
        try:
            return await operation
        except HomeAssistantError:
            raise
        except Exception as err:
            const.LOGGER.error(
                "ERROR: %s: unexpected failure: %s", call.service, err, exc_info=True
            )
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_UNEXPECTED,
                translation_placeholders={"service": call.service, "error": str(err)},
            ) from err

    # --- Engagement ---

    async def handle_toggle_engagement(call: ServiceCall) -> ServiceResponse:
        """Handle toggling an engagement action on an entry."""
        coordinator = get_staffboard_coordinator(hass)
        participant_id = await _async_actor(call, coordinator)
        result = await _async_guarded(
            call,
            coordinator.engagement_manager.toggle_engagement(
                call.data[const.FIELD_ENTRY_ID],
                participant_id,
                EngagementStatus(call.data[const.FIELD_ACTION]),
            ),
        )
        return result.as_dict()

    # --- Entries ---

    async def handle_create_entry(call: ServiceCall) -> ServiceResponse:
        """Handle creating an entry, optionally recurring."""
        coordinator = get_staffboard_coordinator(hass)
        author_id = await _async_actor(call, coordinator)
        rule = _build_rule(call.data)
        target_date: date = call.data.get(const.FIELD_TARGET_DATE) or dt_today_local()

        fields = {
            entry_key: call.data[field]
            for field, entry_key in _ENTRY_FIELD_MAP.items()
            if field in call.data
        }
        return await _async_guarded(
            call,
            coordinator.entry_manager.create_entry(author_id, target_date, fields, rule),
        )

    async def handle_create_reply(call: ServiceCall) -> ServiceResponse:
        """Handle replying to an entry."""
        coordinator = get_staffboard_coordinator(hass)
        author_id = await _async_actor(call, coordinator)
        reply_id = await _async_guarded(
            call,
            coordinator.entry_manager.create_reply(
                author_id, call.data[const.FIELD_ENTRY_ID], call.data[const.FIELD_BODY]
            ),
        )
        return {"reply_id": reply_id}

    async def handle_update_entry(call: ServiceCall) -> None:
        """Handle editing an entry."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        changes = {
            entry_key: call.data[field]
            for field, entry_key in _ENTRY_FIELD_MAP.items()
            if field in call.data
        }
        await _async_guarded(
            call,
            coordinator.entry_manager.update_entry(
                actor_id, call.data[const.FIELD_ENTRY_ID], changes
            ),
        )

    async def handle_delete_entry(call: ServiceCall) -> None:
        """Handle soft deleting an entry."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        await _async_guarded(
            call,
            coordinator.entry_manager.delete_entry(
                actor_id, call.data[const.FIELD_ENTRY_ID]
            ),
        )

    async def handle_set_entry_hidden(call: ServiceCall) -> None:
        """Handle hiding or unhiding an entry."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        await _async_guarded(
            call,
            coordinator.entry_manager.set_entry_hidden(
                actor_id, call.data[const.FIELD_ENTRY_ID], call.data[const.FIELD_HIDDEN]
            ),
        )

    async def handle_update_recurrence_group(call: ServiceCall) -> ServiceResponse:
        """Handle pausing/resuming a recurrence group, its end date or frequency."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        recurrence_config = None
        if const.FIELD_RECURRENCE in call.data:
            recurrence_config = {
                field: call.data[field]
                for field in _RECURRENCE_CONFIG_FIELDS
                if field in call.data
            }
        removed = await _async_guarded(
            call,
            coordinator.entry_manager.update_recurrence_group(
                actor_id,
                call.data[const.FIELD_GROUP_ID],
                end_date=call.data.get(const.FIELD_END_DATE),
                is_active=call.data.get(const.FIELD_IS_ACTIVE),
                recurrence_config=recurrence_config,
            ),
        )
        return {"removed_entries": removed}

    async def handle_delete_recurrence_group(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a recurrence group."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        removed = await _async_guarded(
            call,
            coordinator.entry_manager.delete_recurrence_group(
                actor_id, call.data[const.FIELD_GROUP_ID]
            ),
        )
        return {"removed_entries": removed}

    # --- Duty roster ---

    async def handle_apply_duty_recurrence(call: ServiceCall) -> ServiceResponse:
        """Handle assigning or clearing the duty roster over a recurrence."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        start_date: date = call.data[const.FIELD_START_DATE]

        rule = _build_rule(call.data)
        if rule is None:
            # Without a recurrence the request covers the start date only.
            rule = _build_rule(
                {
                    const.FIELD_RECURRENCE: RecurrenceKind.DAILY,
                    const.FIELD_END_DATE: start_date,
                }
            )

        assignee_name = call.data[const.FIELD_ASSIGNEE_NAME]
        assignee_id = (
            None
            if assignee_name.lower() == const.DUTY_ASSIGNEE_NONE
            else _lookup_participant(coordinator, assignee_name)
        )
        dates = await _async_guarded(
            call,
            coordinator.duty_manager.apply_duty_recurrence(
                actor_id, start_date, rule, assignee_id, call.data[const.FIELD_SLOT]
            ),
        )
        return {"dates": dates}

    async def handle_set_duty_assignment(call: ServiceCall) -> None:
        """Handle assigning a single duty date."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        assignee_id = _lookup_participant(
            coordinator, call.data[const.FIELD_ASSIGNEE_NAME]
        )
        await _async_guarded(
            call,
            coordinator.duty_manager.set_assignment(
                actor_id,
                call.data[const.FIELD_DUTY_DATE],
                assignee_id,
                call.data[const.FIELD_SLOT],
            ),
        )

    async def handle_clear_duty_assignment(call: ServiceCall) -> None:
        """Handle clearing a single duty date."""
        coordinator = get_staffboard_coordinator(hass)
        actor_id = await _async_actor(call, coordinator)
        await _async_guarded(
            call,
            coordinator.duty_manager.clear_assignment(
                actor_id, call.data[const.FIELD_DUTY_DATE], call.data[const.FIELD_SLOT]
            ),
        )

    # --- Participants / points (administration) ---

    async def handle_add_participant(call: ServiceCall) -> ServiceResponse:
        """Handle adding a participant."""
        await _async_require_ha_admin(call)
        coordinator = get_staffboard_coordinator(hass)
        participant_id = await _async_guarded(
            call,
            coordinator.participant_manager.add_participant(
                call.data[const.FIELD_PARTICIPANT_NAME],
                ha_user_id=call.data.get(const.FIELD_HA_USER_ID),
                is_admin=call.data[const.FIELD_IS_ADMIN],
            ),
        )
        return {"participant_id": participant_id}

    async def handle_set_participant_lifecycle(call: ServiceCall) -> None:
        """Handle hiding, restoring or deleting a participant."""
        await _async_require_ha_admin(call)
        coordinator = get_staffboard_coordinator(hass)
        participant_id = _lookup_participant(
            coordinator, call.data[const.FIELD_PARTICIPANT_NAME]
        )
        await _async_guarded(
            call,
            coordinator.participant_manager.set_lifecycle(
                participant_id, ParticipantLifecycle(call.data[const.FIELD_LIFECYCLE])
            ),
        )

    async def handle_set_participant_admin(call: ServiceCall) -> None:
        """Handle granting or revoking board admin rights."""
        await _async_require_ha_admin(call)
        coordinator = get_staffboard_coordinator(hass)
        participant_id = _lookup_participant(
            coordinator, call.data[const.FIELD_PARTICIPANT_NAME]
        )
        await _async_guarded(
            call,
            coordinator.participant_manager.set_admin_role(
                participant_id, call.data[const.FIELD_IS_ADMIN]
            ),
        )

    async def handle_rebuild_points(call: ServiceCall) -> ServiceResponse:
        """Handle rebuilding cached balances from the ledger."""
        await _async_require_ha_admin(call)
        coordinator = get_staffboard_coordinator(hass)
        mismatches = await _async_guarded(
            call, coordinator.economy_manager.rebuild_balances()
        )
        return {
            "corrected": {
                participant_id: {"cached": cached, "ledger": replayed}
                for participant_id, (cached, replayed) in mismatches.items()
            }
        }

    # --- Board reads ---

    async def handle_get_board(call: ServiceCall) -> ServiceResponse:
        """Return one day of the board, with replies and the caller's statuses."""
        coordinator = get_staffboard_coordinator(hass)
        viewer_id = await _async_actor(call, coordinator)
        target_date: date = call.data.get(const.FIELD_TARGET_DATE) or dt_today_local()

        duty_entry = None
        if viewer_id:
            duty_entry = await _async_guarded(
                call,
                coordinator.duty_manager.get_duty_entry_for_participant(
                    target_date, viewer_id
                ),
            )

        entries = coordinator.entry_manager.get_entries_for_date(
            target_date, include_hidden=call.data[const.FIELD_INCLUDE_HIDDEN]
        )
        engagement = coordinator.engagement_manager
        return {
            "date": target_date.isoformat(),
            "participant_id": viewer_id,
            "duty_entry_id": duty_entry["internal_id"] if duty_entry else None,
            "entries": [
                {
                    **entry,
                    "my_status": (
                        engagement.get_participant_status(
                            entry["internal_id"], viewer_id
                        )
                        if viewer_id
                        else None
                    ),
                    "replies": [
                        dict(reply)
                        for reply in coordinator.entry_manager.get_replies(
                            entry["internal_id"]
                        )
                    ],
                }
                for entry in entries
            ],
        }

    async def handle_get_duty_roster(call: ServiceCall) -> ServiceResponse:
        """Return the duty roster between two dates (inclusive)."""
        coordinator = get_staffboard_coordinator(hass)
        start_date: date = call.data[const.FIELD_START_DATE]
        end_date: date = call.data.get(const.FIELD_END_DATE) or start_date
        if end_date < start_date:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_DATE_RANGE,
                translation_placeholders={
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
            )

        participants = coordinator.participants_data
        return {
            "assignments": [
                {
                    "duty_date": row[const.DATA_DUTY_DATE],
                    "slot": row[const.DATA_DUTY_SLOT],
                    "assignee_id": row[const.DATA_DUTY_ASSIGNEE_ID],
                    "assignee_name": participants.get(
                        row[const.DATA_DUTY_ASSIGNEE_ID], {}
                    ).get(const.DATA_PARTICIPANT_NAME),
                }
                for row in coordinator.duty_manager.get_assignments_in_range(
                    start_date, end_date
                )
            ]
        }

    # --- Register Services ---
    registrations = (
        (
            const.SERVICE_TOGGLE_ENGAGEMENT,
            handle_toggle_engagement,
            TOGGLE_ENGAGEMENT_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_CREATE_ENTRY,
            handle_create_entry,
            CREATE_ENTRY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_CREATE_REPLY,
            handle_create_reply,
            CREATE_REPLY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_UPDATE_ENTRY,
            handle_update_entry,
            UPDATE_ENTRY_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_DELETE_ENTRY,
            handle_delete_entry,
            DELETE_ENTRY_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_SET_ENTRY_HIDDEN,
            handle_set_entry_hidden,
            SET_ENTRY_HIDDEN_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_UPDATE_RECURRENCE_GROUP,
            handle_update_recurrence_group,
            UPDATE_RECURRENCE_GROUP_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_DELETE_RECURRENCE_GROUP,
            handle_delete_recurrence_group,
            DELETE_RECURRENCE_GROUP_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_APPLY_DUTY_RECURRENCE,
            handle_apply_duty_recurrence,
            APPLY_DUTY_RECURRENCE_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_SET_DUTY_ASSIGNMENT,
            handle_set_duty_assignment,
            SET_DUTY_ASSIGNMENT_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_CLEAR_DUTY_ASSIGNMENT,
            handle_clear_duty_assignment,
            CLEAR_DUTY_ASSIGNMENT_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_ADD_PARTICIPANT,
            handle_add_participant,
            ADD_PARTICIPANT_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_SET_PARTICIPANT_LIFECYCLE,
            handle_set_participant_lifecycle,
            SET_PARTICIPANT_LIFECYCLE_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_SET_PARTICIPANT_ADMIN,
            handle_set_participant_admin,
            SET_PARTICIPANT_ADMIN_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_REBUILD_POINTS,
            handle_rebuild_points,
            REBUILD_POINTS_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_GET_BOARD,
            handle_get_board,
            GET_BOARD_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_GET_DUTY_ROSTER,
            handle_get_duty_roster,
            GET_DUTY_ROSTER_SCHEMA,
            SupportsResponse.ONLY,
        ),
    )
    for service, handler, schema, supports_response in registrations:
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=supports_response,
        )

    const.LOGGER.info("INFO: StaffBoard services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister StaffBoard services when unloading the integration."""
    for service in _ALL_SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: StaffBoard services have been unregistered")
