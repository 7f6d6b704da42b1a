"""Unit tests for LedgerEngine - ledger rows, balances and audits."""

from __future__ import annotations

from custom_components.staffboard.engines.ledger_engine import LedgerEngine

ALICE = "participant-alice"
BOB = "participant-bob"


def _rows() -> list[dict]:
    return [
        LedgerEngine.create_ledger_entry(ALICE, 0, 10, "SOLVED", "entry-1"),
        LedgerEngine.create_ledger_entry(BOB, 0, 5, "WORKING", "entry-1"),
        LedgerEngine.create_ledger_entry(ALICE, 10, -10, "SOLVED_CANCEL", "entry-1"),
        LedgerEngine.create_ledger_entry(ALICE, 0, 3, "REPLY", "entry-2"),
    ]


class TestCreateLedgerEntry:
    """Tests for ledger row creation."""

    def test_row_fields(self) -> None:
        """A row carries the signed amount and the running balance."""
        row = LedgerEngine.create_ledger_entry(
            ALICE, 7, -5, "WORKING_CANCEL", "entry-1", "2024-06-03T10:00:00+00:00"
        )
        assert row["participant_id"] == ALICE
        assert row["amount"] == -5
        assert row["reason"] == "WORKING_CANCEL"
        assert row["entry_id"] == "entry-1"
        assert row["timestamp"] == "2024-06-03T10:00:00+00:00"
        assert row["balance_after"] == 2

    def test_unique_ids_and_default_timestamp(self) -> None:
        """Each row gets its own id and a timestamp when none is given."""
        first = LedgerEngine.create_ledger_entry(ALICE, 0, 1, "CONFIRMED")
        second = LedgerEngine.create_ledger_entry(ALICE, 1, 1, "CONFIRMED")
        assert first["ledger_id"] != second["ledger_id"]
        assert first["timestamp"]
        assert first["entry_id"] is None

    def test_balance_may_go_negative(self) -> None:
        """Balances are not clamped at zero."""
        assert LedgerEngine.calculate_new_balance(2, -5) == -3


class TestReplayAndAudit:
    """Tests for balance replay and discrepancy detection."""

    def test_replay_balance(self) -> None:
        """Replay sums only the participant's rows."""
        rows = _rows()
        assert LedgerEngine.replay_balance(rows, ALICE) == 3
        assert LedgerEngine.replay_balance(rows, BOB) == 5
        assert LedgerEngine.replay_balance(rows, "nobody") == 0

    def test_entries_for_participant_keeps_order(self) -> None:
        """Participant rows come back oldest first."""
        reasons = [
            row["reason"] for row in LedgerEngine.entries_for_participant(_rows(), ALICE)
        ]
        assert reasons == ["SOLVED", "SOLVED_CANCEL", "REPLY"]

    def test_find_discrepancies(self) -> None:
        """Only mismatching cached balances are reported."""
        mismatches = LedgerEngine.find_discrepancies(
            _rows(), {ALICE: 3, BOB: 9, "participant-carol": 0}
        )
        assert mismatches == {BOB: (9, 5)}
