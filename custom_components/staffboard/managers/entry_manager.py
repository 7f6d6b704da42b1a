"""Entry Manager - Board entries, replies, and recurring entry groups.

This manager handles:
- Creating single or recurring entries (recurrence expansion + bulk insert)
- Replies (entries with a parent)
- Author/admin editing, soft delete, and soft hide
- Recurrence group maintenance (pause, shorten, change frequency, delete)
- POST and REPLY point awards

Recurring creation is validated before anything is written: an invalid range,
an empty selection, or more than const.MAX_BULK_OCCURRENCES dates is rejected
as a whole.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from .. import const
from ..const import EngagementStatus, EntryType, EntryVisibility
from ..engines.recurrence_engine import (
    InvalidRecurrenceConfigError,
    RecurrenceEngine,
    RecurrenceRule,
)
from ..utils.dt_utils import dt_now_iso, dt_parse_date, dt_today_local
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import EntryData, RecurrenceGroupData


class EntryManager(BaseManager):
    """Manager for board entries and recurrence groups."""

    async def async_setup(self) -> None:
        """Backfill fields missing from entries written by older versions."""
        for entry in self.store.entries.values():
            entry.setdefault("visibility", str(EntryVisibility.VISIBLE))
            entry.setdefault("status", str(EngagementStatus.UNREAD))
            entry.setdefault("parent_id", None)
            entry.setdefault("recurrence_group_id", None)
            entry.setdefault("entry_type", str(EntryType.STANDARD))
            entry.setdefault("target_participant_id", None)
        for group in self.store.recurrence_groups.values():
            group.setdefault(
                "recurrence_config",
                {
                    const.FIELD_RECURRENCE: group.get(const.DATA_GROUP_KIND),
                    const.FIELD_END_DATE: group.get(const.DATA_GROUP_END_DATE),
                },
            )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_entry_or_raise(self, entry_id: str) -> EntryData:
        """Return a live (not deleted) entry or raise a not-found error."""
        entry = self.store.entries.get(entry_id)
        if (
            entry is None
            or entry.get(const.DATA_ENTRY_VISIBILITY) == EntryVisibility.DELETED
        ):
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "item_type": const.LABEL_ENTRY,
                    "item_id": entry_id,
                },
            )
        return entry

    def get_entries_for_date(
        self, target_date: date, *, include_hidden: bool = False
    ) -> list[EntryData]:
        """Return top-level entries for a date in board order.

        Unsolved entries come first: those with a deadline by nearest deadline,
        then those without one. Within each group (and among solved entries)
        the newest entry comes first. Deleted entries are never returned.
        """
        iso_date = target_date.isoformat()
        allowed = {str(EntryVisibility.VISIBLE)}
        if include_hidden:
            allowed.add(str(EntryVisibility.HIDDEN))

        entries = [
            entry
            for entry in self.store.entries.values()
            if entry.get(const.DATA_ENTRY_TARGET_DATE) == iso_date
            and entry.get(const.DATA_ENTRY_PARENT_ID) is None
            and entry.get(const.DATA_ENTRY_VISIBILITY) in allowed
        ]
        # Stable two-pass sort: newest first, then the board grouping
        entries.sort(key=lambda e: e.get(const.DATA_CREATED_AT) or "", reverse=True)
        entries.sort(key=self._board_sort_key)
        return entries

    @staticmethod
    def _board_sort_key(entry: EntryData) -> tuple[bool, bool, str]:
        """Return (solved, no deadline, deadline); deadlines only rank unsolved."""
        if entry.get(const.DATA_ENTRY_STATUS) == EngagementStatus.SOLVED:
            return (True, True, "")
        deadline = entry.get(const.DATA_ENTRY_DEADLINE)
        return (False, not deadline, deadline or "")

    def get_replies(self, parent_id: str) -> list[EntryData]:
        """Return non-deleted replies to an entry, oldest first."""
        replies = [
            entry
            for entry in self.store.entries.values()
            if entry.get(const.DATA_ENTRY_PARENT_ID) == parent_id
            and entry.get(const.DATA_ENTRY_VISIBILITY) != EntryVisibility.DELETED
        ]
        return sorted(replies, key=lambda e: e.get(const.DATA_CREATED_AT, ""))

    def _get_group_or_raise(self, group_id: str) -> RecurrenceGroupData:
        """Return a recurrence group or raise a not-found error."""
        group = self.store.recurrence_groups.get(group_id)
        if group is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                translation_placeholders={
                    "item_type": const.LABEL_RECURRENCE_GROUP,
                    "item_id": group_id,
                },
            )
        return group

    def _require_author_or_admin(self, actor_id: str, author_id: str) -> None:
        """Raise unless the actor wrote the record or is a board admin."""
        if actor_id == author_id:
            return
        if self.coordinator.participant_manager.is_admin(actor_id):
            return
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_PERMITTED,
        )

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @staticmethod
    def build_entry(
        author_id: str,
        target_date: date,
        fields: dict[str, Any],
        *,
        parent_id: str | None = None,
        recurrence_group_id: str | None = None,
        entry_type: EntryType = EntryType.STANDARD,
        target_participant_id: str | None = None,
    ) -> EntryData:
        """Build a new UNREAD entry record."""
        deadline = dt_parse_date(fields.get(const.DATA_ENTRY_DEADLINE))
        return {
            "internal_id": str(uuid.uuid4()),
            "author_id": author_id,
            "category": fields.get(const.DATA_ENTRY_CATEGORY),
            "title": fields.get(const.DATA_ENTRY_TITLE),
            "body": fields.get(const.DATA_ENTRY_BODY, ""),
            "target_date": target_date.isoformat(),
            "is_urgent": bool(fields.get(const.DATA_ENTRY_IS_URGENT, False)),
            "deadline": deadline.isoformat() if deadline else None,
            "bounty_points": int(fields.get(const.DATA_ENTRY_BOUNTY_POINTS) or 0),
            "status": str(EngagementStatus.UNREAD),
            "solved_by": None,
            "solved_at": None,
            "recurrence_group_id": recurrence_group_id,
            "parent_id": parent_id,
            "visibility": str(EntryVisibility.VISIBLE),
            "entry_type": str(entry_type),
            "target_participant_id": target_participant_id,
            "created_at": dt_now_iso(),
            "updated_at": None,
            "updated_by": None,
        }

    async def create_entry(
        self,
        author_id: str | None,
        target_date: date,
        fields: dict[str, Any],
        rule: RecurrenceRule | None = None,
    ) -> dict[str, Any]:
        """Create one entry, or one entry per occurrence of ``rule``.

        POST points are awarded once for the authoring action, however many
        occurrences it produces.

        Returns:
            ``{"entry_ids": [...], "recurrence_group_id": str | None}``

        Raises:
            Unauthorized: No authenticated participant.
            ServiceValidationError: The recurrence request is invalid.
        """
        author = self.coordinator.participant_manager.require_authenticated(author_id)
        author_id = author["internal_id"]

        group_id: str | None = None
        if rule is None:
            new_entries = [self.build_entry(author_id, target_date, fields)]
        else:
            validation = RecurrenceEngine.validate(target_date, rule)
            if not validation.is_valid:
                const.LOGGER.warning(
                    "EntryManager.create_entry: rejected recurrence (%s) %s",
                    validation.error_key,
                    validation.placeholders,
                )
                raise ServiceValidationError(
                    translation_domain=const.DOMAIN,
                    translation_key=validation.error_key,
                    translation_placeholders=validation.placeholders,
                )

            group_id = str(uuid.uuid4())
            self.store.recurrence_groups[group_id] = {
                "internal_id": group_id,
                "author_id": author_id,
                "kind": str(rule.kind),
                "recurrence_config": RecurrenceEngine.rule_to_config(rule),
                "start_date": target_date.isoformat(),
                "end_date": rule.end_date.isoformat(),
                "is_active": True,
                "created_at": dt_now_iso(),
                "updated_at": None,
            }
            new_entries = [
                self.build_entry(
                    author_id, occurrence, fields, recurrence_group_id=group_id
                )
                for occurrence in validation.dates
            ]

        entry_ids = self.store.bulk_insert_entries(new_entries)
        self.coordinator.economy_manager.award(
            author_id, const.POINTS_POST, const.POINTS_REASON_POST, entry_ids[0]
        )
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Created %s entr%s for author %s (group=%s)",
            len(entry_ids),
            "y" if len(entry_ids) == 1 else "ies",
            author_id,
            group_id,
        )
        self.emit(
            const.SIGNAL_SUFFIX_ENTRY_CREATED,
            entry_ids=entry_ids,
            recurrence_group_id=group_id,
        )
        return {"entry_ids": entry_ids, "recurrence_group_id": group_id}

    async def create_reply(
        self, author_id: str | None, parent_id: str, body: str
    ) -> str:
        """Create a reply to an entry and award REPLY points.

        Raises:
            Unauthorized: No authenticated participant.
            HomeAssistantError: Unknown or deleted parent entry.
        """
        author = self.coordinator.participant_manager.require_authenticated(author_id)
        author_id = author["internal_id"]
        parent = self.get_entry_or_raise(parent_id)

        reply = self.build_entry(
            author_id,
            date.fromisoformat(parent[const.DATA_ENTRY_TARGET_DATE]),
            {const.DATA_ENTRY_BODY: body},
            parent_id=parent_id,
        )
        self.store.insert_entry(reply)
        self.coordinator.economy_manager.award(
            author_id, const.POINTS_REPLY, const.POINTS_REASON_REPLY, reply["internal_id"]
        )
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Reply %s created on entry %s by %s",
            reply["internal_id"],
            parent_id,
            author_id,
        )
        self.emit(
            const.SIGNAL_SUFFIX_ENTRY_CREATED,
            entry_ids=[reply["internal_id"]],
            recurrence_group_id=None,
        )
        return reply["internal_id"]

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    async def update_entry(
        self, actor_id: str | None, entry_id: str, changes: dict[str, Any]
    ) -> EntryData:
        """Apply editable field changes (author or admin only).

        Keys outside const.ENTRY_EDITABLE_FIELDS are ignored.
        """
        actor = self.coordinator.participant_manager.require_authenticated(actor_id)
        actor_id = actor["internal_id"]
        entry = self.get_entry_or_raise(entry_id)
        self._require_author_or_admin(actor_id, entry[const.DATA_ENTRY_AUTHOR_ID])

        for key in const.ENTRY_EDITABLE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if key == const.DATA_ENTRY_DEADLINE:
                parsed = dt_parse_date(value)
                value = parsed.isoformat() if parsed else None
            elif key == const.DATA_ENTRY_BOUNTY_POINTS:
                value = int(value or 0)
            elif key == const.DATA_ENTRY_IS_URGENT:
                value = bool(value)
            entry[key] = value

        entry["updated_at"] = dt_now_iso()
        entry["updated_by"] = actor_id
        await self.coordinator.async_persist_and_update()

        const.LOGGER.debug(
            "EntryManager.update_entry: entry=%s fields=%s by=%s",
            entry_id,
            [k for k in changes if k in const.ENTRY_EDITABLE_FIELDS],
            actor_id,
        )
        self.emit(const.SIGNAL_SUFFIX_ENTRY_UPDATED, entry_id=entry_id)
        return entry

    async def delete_entry(self, actor_id: str | None, entry_id: str) -> None:
        """Soft delete an entry (author or admin only)."""
        await self._set_visibility(actor_id, entry_id, EntryVisibility.DELETED)

    async def set_entry_hidden(
        self, actor_id: str | None, entry_id: str, hidden: bool
    ) -> None:
        """Soft hide or unhide an entry (author or admin only)."""
        await self._set_visibility(
            actor_id,
            entry_id,
            EntryVisibility.HIDDEN if hidden else EntryVisibility.VISIBLE,
        )

    async def _set_visibility(
        self, actor_id: str | None, entry_id: str, visibility: EntryVisibility
    ) -> None:
        """Change entry visibility after the author/admin check."""
        actor = self.coordinator.participant_manager.require_authenticated(actor_id)
        actor_id = actor["internal_id"]
        entry = self.get_entry_or_raise(entry_id)
        self._require_author_or_admin(actor_id, entry[const.DATA_ENTRY_AUTHOR_ID])

        entry["visibility"] = str(visibility)
        entry["updated_at"] = dt_now_iso()
        entry["updated_by"] = actor_id
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Entry %s visibility set to %s by %s", entry_id, visibility, actor_id
        )
        self.emit(
            const.SIGNAL_SUFFIX_ENTRY_UPDATED,
            entry_id=entry_id,
            visibility=str(visibility),
        )

    # -------------------------------------------------------------------------
    # Recurrence groups
    # -------------------------------------------------------------------------

    def _unread_group_entries(
        self, group_id: str, cutoff: date, *, inclusive: bool = False
    ) -> list[str]:
        """Return ids of still-UNREAD group entries dated after ``cutoff``.

        With ``inclusive`` the cutoff date itself is included.
        """
        iso_cutoff = cutoff.isoformat()
        return [
            entry_id
            for entry_id, entry in self.store.entries.items()
            if entry.get(const.DATA_ENTRY_RECURRENCE_GROUP_ID) == group_id
            and entry.get(const.DATA_ENTRY_STATUS) == EngagementStatus.UNREAD
            and (
                entry.get(const.DATA_ENTRY_TARGET_DATE, "") >= iso_cutoff
                if inclusive
                else entry.get(const.DATA_ENTRY_TARGET_DATE, "") > iso_cutoff
            )
        ]

    def _remove_entries(self, entry_ids: list[str]) -> int:
        """Remove entries (and their replies) and release their toggle locks."""
        removed = self.store.remove_entries(entry_ids)
        self.coordinator.engagement_manager.release_locks(removed)
        return len(removed)

    def _require_group_owner(
        self, actor_id: str | None, group_id: str
    ) -> RecurrenceGroupData:
        """Return the group after checking the actor created it."""
        actor = self.coordinator.participant_manager.require_authenticated(actor_id)
        group = self._get_group_or_raise(group_id)
        if group[const.DATA_GROUP_AUTHOR_ID] != actor["internal_id"]:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NOT_PERMITTED,
            )
        return group

    @staticmethod
    def _rule_for_group(
        end_date: date, recurrence_config: dict[str, Any]
    ) -> RecurrenceRule:
        """Build the replacement rule of a group ending on ``end_date``."""
        config = {**recurrence_config, const.FIELD_END_DATE: end_date}
        try:
            rule = RecurrenceEngine.rule_from_config(config)
        except InvalidRecurrenceConfigError as err:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_RECURRENCE,
                translation_placeholders={
                    "field": err.field_name,
                    "value": str(err.value),
                },
            ) from err
        if rule is None:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_RECURRENCE,
                translation_placeholders={
                    "field": const.FIELD_RECURRENCE,
                    "value": str(config.get(const.FIELD_RECURRENCE)),
                },
            )
        return rule

    async def update_recurrence_group(
        self,
        actor_id: str | None,
        group_id: str,
        *,
        end_date: date | None = None,
        is_active: bool | None = None,
        recurrence_config: dict[str, Any] | None = None,
        today: date | None = None,
    ) -> int:
        """Pause/resume a group, move its end date or change its frequency.

        Moving the end date removes still-UNREAD entries dated after it.
        Changing the frequency removes still-UNREAD entries from today on;
        nothing is regenerated.

        Returns:
            Number of entries removed.
        """
        group = self._require_group_owner(actor_id, group_id)
        rule = None
        if recurrence_config is not None:
            rule = self._rule_for_group(
                end_date or date.fromisoformat(group[const.DATA_GROUP_END_DATE]),
                recurrence_config,
            )

        doomed: list[str] = []
        if is_active is not None:
            group["is_active"] = is_active
        if end_date is not None:
            group["end_date"] = end_date.isoformat()
            doomed.extend(self._unread_group_entries(group_id, end_date))
        if rule is not None:
            group["kind"] = str(rule.kind)
            group["recurrence_config"] = RecurrenceEngine.rule_to_config(rule)
            doomed.extend(
                self._unread_group_entries(
                    group_id, today or dt_today_local(), inclusive=True
                )
            )
        removed = self._remove_entries(doomed)
        group["updated_at"] = dt_now_iso()
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Recurrence group %s updated (active=%s end=%s kind=%s), "
            "removed %s entries",
            group_id,
            group[const.DATA_GROUP_IS_ACTIVE],
            group[const.DATA_GROUP_END_DATE],
            group[const.DATA_GROUP_KIND],
            removed,
        )
        return removed

    async def delete_recurrence_group(
        self,
        actor_id: str | None,
        group_id: str,
        today: date | None = None,
    ) -> int:
        """Delete a recurrence group (owner only).

        Still-UNREAD entries after today are removed, the remaining entries are
        detached from the group, then the group itself is deleted.

        Returns:
            Number of entries removed.
        """
        self._require_group_owner(actor_id, group_id)

        removed = self._remove_entries(
            self._unread_group_entries(group_id, today or dt_today_local())
        )
        for entry in self.store.entries.values():
            if entry.get(const.DATA_ENTRY_RECURRENCE_GROUP_ID) == group_id:
                entry["recurrence_group_id"] = None
        del self.store.recurrence_groups[group_id]
        await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Recurrence group %s deleted, removed %s entries", group_id, removed
        )
        return removed
