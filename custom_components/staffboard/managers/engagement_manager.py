"""Engagement Manager - Per-participant engagement toggles on board entries.

Orchestrates one toggle end to end:
1. Authenticate the participant and load the entry
2. Plan the toggle (EngagementEngine.plan_toggle)
3. Upsert the participant status
4. ActionRecord insert-or-ignore (toggle-on) or delete (toggle-off)
5. Ledger award / reversal through EconomyManager
6. Aggregate status resolution (EngagementEngine.resolve_after_toggle)
7. Persist once, emit, return the authoritative result

Race condition protection: each (entry, participant) pair has its own
asyncio.Lock, and the ActionRecord uniqueness check lives inside the store's
synchronous insert, so two concurrent toggles can never both be paid.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from homeassistant.exceptions import ServiceValidationError

from .. import const
from ..const import EngagementStatus
from ..engines.engagement_engine import EngagementEngine, ToggleResult
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import StaffBoardCoordinator


class EngagementManager(BaseManager):
    """Manager for engagement toggles and entry aggregate status."""

    def __init__(self, hass: HomeAssistant, coordinator: StaffBoardCoordinator) -> None:
        """Initialize the EngagementManager."""
        super().__init__(hass, coordinator)
        self._toggle_locks: dict[str, asyncio.Lock] = {}

    async def async_setup(self) -> None:
        """Nothing to prepare; toggles are request driven."""

    def _get_lock(self, entry_id: str, participant_id: str) -> asyncio.Lock:
        """Get or create a lock for an entry+participant combination."""
        lock_key = f"{entry_id}:{participant_id}"
        if lock_key not in self._toggle_locks:
            self._toggle_locks[lock_key] = asyncio.Lock()
        return self._toggle_locks[lock_key]

    def release_locks(self, entry_ids: set[str]) -> None:
        """Forget the toggle locks of entries that no longer exist."""
        stale = [
            lock_key
            for lock_key in self._toggle_locks
            if lock_key.split(":", 1)[0] in entry_ids
        ]
        for lock_key in stale:
            del self._toggle_locks[lock_key]
        if stale:
            const.LOGGER.debug(
                "EngagementManager.release_locks: dropped %s lock(s)", len(stale)
            )

    def get_participant_status(self, entry_id: str, participant_id: str) -> str:
        """Return a participant's current status for an entry."""
        return self.store.get_engagement_status(entry_id, participant_id)

    async def toggle_engagement(
        self,
        entry_id: str,
        participant_id: str | None,
        action: EngagementStatus | str,
    ) -> ToggleResult:
        """Toggle an engagement action with race condition protection.

        Args:
            entry_id: Board entry internal id
            participant_id: Authenticated participant (None means unauthenticated)
            action: CONFIRMED, WORKING or SOLVED

        Raises:
            Unauthorized: No authenticated participant.
            HomeAssistantError: Unknown or deleted entry.
            ServiceValidationError: ``action`` is not toggleable.
        """
        participant = self.coordinator.participant_manager.require_authenticated(
            participant_id
        )
        participant_id = participant["internal_id"]
        self.coordinator.entry_manager.get_entry_or_raise(entry_id)

        if not EngagementEngine.is_valid_action(action):
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_ACTION,
                translation_placeholders={"action": str(action)},
            )

        lock = self._get_lock(entry_id, participant_id)
        async with lock:
            result = self._toggle_locked(
                entry_id, participant_id, EngagementStatus(action)
            )
            await self.coordinator.async_persist_and_update()

        const.LOGGER.info(
            "INFO: Engagement toggled: entry=%s participant=%s action=%s off=%s "
            "status=%s aggregate=%s points=%+d",
            entry_id,
            participant_id,
            action,
            result.toggled_off,
            result.new_participant_status,
            result.new_aggregate_status,
            result.points_delta,
        )
        self.emit(
            const.SIGNAL_SUFFIX_ENGAGEMENT_TOGGLED,
            entry_id=entry_id,
            participant_id=participant_id,
            **result.as_dict(),
        )
        return result

    def _toggle_locked(
        self,
        entry_id: str,
        participant_id: str,
        action: EngagementStatus,
    ) -> ToggleResult:
        """Toggle implementation (called inside lock, no suspension points)."""
        entry = self.coordinator.entry_manager.get_entry_or_raise(entry_id)
        economy = self.coordinator.economy_manager

        current_status = self.store.get_engagement_status(entry_id, participant_id)
        effect = EngagementEngine.plan_toggle(current_status, action)
        self.store.upsert_engagement_status(
            entry_id, participant_id, effect.new_status
        )

        points_delta = 0
        if effect.toggled_off:
            record = self.store.delete_action_record(entry_id, participant_id, action)
            if record is not None:
                amount = int(record.get(const.DATA_ACTION_POINTS_AWARDED, 0))
                economy.reverse(
                    participant_id,
                    amount,
                    EngagementEngine.ledger_reason(action, reversal=True),
                    entry_id,
                )
                points_delta = -amount
        elif self.store.insert_action_record(
            entry_id, participant_id, action, effect.points
        ):
            economy.award(
                participant_id,
                effect.points,
                EngagementEngine.ledger_reason(action),
                entry_id,
            )
            points_delta = effect.points

        resolution = EngagementEngine.resolve_after_toggle(
            entry.get(const.DATA_ENTRY_STATUS, EngagementStatus.UNREAD),
            effect,
            self.store.list_non_unread_statuses(entry_id),
        )
        if resolution.set_solver:
            self.store.update_entry_aggregate(
                entry_id, resolution.status, participant_id, dt_now_iso()
            )
        elif resolution.clear_solver:
            self.store.update_entry_aggregate(entry_id, resolution.status)
        elif resolution.changed:
            self.store.update_entry_aggregate(
                entry_id,
                resolution.status,
                entry.get(const.DATA_ENTRY_SOLVED_BY),
                entry.get(const.DATA_ENTRY_SOLVED_AT),
            )

        return ToggleResult(
            toggled_off=effect.toggled_off,
            new_participant_status=effect.new_status,
            new_aggregate_status=resolution.status,
            aggregate_changed=resolution.changed,
            points_delta=points_delta,
        )
