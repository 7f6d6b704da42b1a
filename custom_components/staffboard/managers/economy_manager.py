"""Economy Manager - Point ledger and participant balances.

This manager handles all point-related operations:
- Awards (positive ledger rows)
- Reversals (negative counterpart rows)
- Balance and history queries
- Ledger replay, audit, and balance repair
- Event emission for point changes

ARCHITECTURE:
- EconomyManager = "The Bank" (STATEFUL point operations)
- LedgerEngine = Pure ledger rows and balance arithmetic (STATELESS)

``award`` and ``reverse`` are synchronous: the ledger append and the balance
increment happen in one step on the event loop with no suspension point in
between. The calling operation persists once when it is done; the
POINTS_CHANGED events queued by the transactions go out only after that save
succeeds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.ledger_engine import LedgerEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import StaffBoardCoordinator
    from ..type_defs import LedgerEntry


class EconomyManager(BaseManager):
    """Manager for all point transactions and ledger operations.

    Responsibilities:
    - Append immutable ledger rows and keep cached balances in step
    - Emit SIGNAL_SUFFIX_POINTS_CHANGED events
    - Rebuild balances from the ledger on demand

    NOT responsible for:
    - Deciding whether an action is payable (EngagementManager owns ActionRecords)
    - Persistence timing (the calling operation persists once)
    """

    def __init__(self, hass: HomeAssistant, coordinator: StaffBoardCoordinator) -> None:
        """Initialize the EconomyManager."""
        super().__init__(hass, coordinator)
        self._pending_events: list[dict[str, Any]] = []

    async def async_setup(self) -> None:
        """Audit cached balances against the ledger on load."""
        mismatches = self.audit_balances()
        for participant_id, (cached, replayed) in mismatches.items():
            const.LOGGER.warning(
                "WARNING: Balance mismatch for participant %s: cached=%s ledger=%s",
                participant_id,
                cached,
                replayed,
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_balance(self, participant_id: str) -> int:
        """Get current point balance for a participant (0 if unknown)."""
        participant = self.store.participants.get(participant_id)
        if not participant:
            const.LOGGER.warning(
                "EconomyManager.get_balance: Participant ID '%s' not found",
                participant_id,
            )
            return 0

        try:
            return int(participant.get(const.DATA_PARTICIPANT_POINTS, 0))
        except (ValueError, TypeError):
            return 0

    def get_history(
        self,
        participant_id: str,
        limit: int = const.DEFAULT_LEDGER_HISTORY_LIMIT,
    ) -> list[LedgerEntry]:
        """Get recent ledger rows for a participant (oldest first, newest last)."""
        rows = LedgerEngine.entries_for_participant(self.store.ledger, participant_id)
        return rows[-limit:] if len(rows) > limit else rows

    def replay_balance(self, participant_id: str) -> int:
        """Rebuild a participant's balance by replaying the ledger."""
        return LedgerEngine.replay_balance(self.store.ledger, participant_id)

    def audit_balances(self) -> dict[str, tuple[int, int]]:
        """Return (cached, replayed) for every participant whose balance drifted."""
        balances = {
            participant_id: int(participant.get(const.DATA_PARTICIPANT_POINTS, 0))
            for participant_id, participant in self.store.participants.items()
        }
        return LedgerEngine.find_discrepancies(self.store.ledger, balances)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def award(
        self,
        participant_id: str,
        amount: int,
        reason: str,
        entry_id: str | None = None,
    ) -> LedgerEntry:
        """Append a positive ledger row and increment the balance.

        Raises:
            ValueError: If the participant is unknown or amount is negative.
        """
        if amount < 0:
            raise ValueError(f"Award amount must be positive, got {amount}")
        return self._apply(participant_id, amount, reason, entry_id)

    def reverse(
        self,
        participant_id: str,
        amount: int,
        reason: str,
        entry_id: str | None = None,
    ) -> LedgerEntry:
        """Append the negative counterpart of an earlier award.

        Args:
            amount: The originally awarded (positive) amount

        Raises:
            ValueError: If the participant is unknown or amount is negative.
        """
        if amount < 0:
            raise ValueError(f"Reversal amount must be positive, got {amount}")
        return self._apply(participant_id, -amount, reason, entry_id)

    def _apply(
        self,
        participant_id: str,
        delta: int,
        reason: str,
        entry_id: str | None,
    ) -> LedgerEntry:
        """Append one ledger row and apply its delta to the cached balance."""
        if participant_id not in self.store.participants:
            const.LOGGER.error(
                "EconomyManager._apply: Participant ID '%s' not found",
                participant_id,
            )
            raise ValueError(f"Participant not found: {participant_id}")

        old_balance = self.get_balance(participant_id)
        entry = LedgerEngine.create_ledger_entry(
            participant_id=participant_id,
            current_balance=old_balance,
            amount=delta,
            reason=reason,
            entry_id=entry_id,
        )
        self.store.append_ledger_entry(entry)
        new_balance = self.store.increment_participant_balance(participant_id, delta)

        const.LOGGER.debug(
            "EconomyManager: participant=%s, delta=%d, old=%d, new=%d, reason=%s",
            participant_id,
            delta,
            old_balance,
            new_balance,
            reason,
        )
        self._pending_events.append(
            {
                "participant_id": participant_id,
                "old_balance": old_balance,
                "new_balance": new_balance,
                "delta": delta,
                "reason": reason,
                "entry_id": entry_id,
            }
        )
        return entry

    def flush_point_events(self) -> None:
        """Emit the POINTS_CHANGED events queued since the last save."""
        events, self._pending_events = self._pending_events, []
        for payload in events:
            self.emit(const.SIGNAL_SUFFIX_POINTS_CHANGED, **payload)

    def discard_point_events(self) -> None:
        """Drop queued POINTS_CHANGED events after a failed save."""
        if self._pending_events:
            const.LOGGER.warning(
                "WARNING: Dropping %s unsaved points event(s)",
                len(self._pending_events),
            )
        self._pending_events = []

    async def rebuild_balances(self) -> dict[str, tuple[int, int]]:
        """Repair cached balances from the ledger and persist.

        Returns:
            Mapping participant_id -> (previous cached, rebuilt) for repaired rows.
        """
        mismatches = self.audit_balances()
        if not mismatches:
            return {}

        for participant_id, (cached, replayed) in mismatches.items():
            self.store.participants[participant_id]["points"] = replayed
            const.LOGGER.info(
                "INFO: Rebuilt balance for participant %s: %s -> %s",
                participant_id,
                cached,
                replayed,
            )

        try:
            await self.coordinator.async_persist_and_update()
        except HomeAssistantError:
            const.LOGGER.error("ERROR: Failed to persist rebuilt balances")
            raise

        for participant_id, (cached, replayed) in mismatches.items():
            self.emit(
                const.SIGNAL_SUFFIX_POINTS_CHANGED,
                participant_id=participant_id,
                old_balance=cached,
                new_balance=replayed,
                delta=replayed - cached,
                reason="rebuild",
                entry_id=None,
            )
        return mismatches
