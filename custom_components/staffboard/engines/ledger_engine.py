"""Ledger Engine - Pure logic for the append-only point ledger.

This engine provides stateless, pure Python functions for:
- Ledger entry creation
- Balance arithmetic
- Balance replay and audit from the ledger

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
State management belongs in EconomyManager.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from ..type_defs import LedgerEntry


def _now_iso() -> str:
    """Return current UTC time as ISO string (engine-internal helper)."""
    return datetime.now(UTC).isoformat()


class LedgerEngine:
    """Pure logic engine for ledger rows and balances.

    Ledger rows are never edited or deleted. A correction is always a new row
    carrying the negated amount and the same entry reference.
    """

    @staticmethod
    def create_ledger_entry(
        participant_id: str,
        current_balance: int,
        amount: int,
        reason: str,
        entry_id: str | None = None,
        timestamp: str | None = None,
    ) -> LedgerEntry:
        """Create a ledger row for a signed point amount.

        Args:
            participant_id: Participant receiving (or losing) the points
            current_balance: Balance before this row
            amount: Signed delta
            reason: Human-readable reason (e.g. "SOLVED", "SOLVED_CANCEL")
            entry_id: Related board entry, if any
            timestamp: Optional ISO timestamp (defaults to now, UTC)
        """
        return {
            "ledger_id": str(uuid.uuid4()),
            "participant_id": participant_id,
            "amount": amount,
            "reason": reason,
            "entry_id": entry_id,
            "timestamp": timestamp or _now_iso(),
            "balance_after": LedgerEngine.calculate_new_balance(
                current_balance, amount
            ),
        }

    @staticmethod
    def calculate_new_balance(current_balance: int, delta: int) -> int:
        """Return the balance after applying a delta."""
        return int(current_balance) + int(delta)

    @staticmethod
    def replay_balance(ledger: Iterable[LedgerEntry], participant_id: str) -> int:
        """Rebuild a participant's balance by summing their ledger rows."""
        return sum(
            int(row.get("amount", 0))
            for row in ledger
            if row.get("participant_id") == participant_id
        )

    @staticmethod
    def entries_for_participant(
        ledger: Iterable[LedgerEntry], participant_id: str
    ) -> list[LedgerEntry]:
        """Return a participant's ledger rows, oldest first."""
        return [row for row in ledger if row.get("participant_id") == participant_id]

    @staticmethod
    def find_discrepancies(
        ledger: Iterable[LedgerEntry], balances: dict[str, int]
    ) -> dict[str, tuple[int, int]]:
        """Compare cached balances against ledger replays.

        Returns:
            Mapping participant_id -> (cached, replayed) for every mismatch.
        """
        rows = list(ledger)
        mismatches: dict[str, tuple[int, int]] = {}
        for participant_id, cached in balances.items():
            replayed = LedgerEngine.replay_balance(rows, participant_id)
            if int(cached) != replayed:
                mismatches[participant_id] = (int(cached), replayed)
        return mismatches
