"""Engagement Engine - Pure logic for engagement toggles and aggregate status.

This engine provides stateless, pure Python functions for:
- Toggle planning (toggle-on vs toggle-off, resulting participant status)
- Point tariff lookup for engagement actions
- Entry aggregate status resolution after a toggle

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
State management (ActionRecords, ledger, persistence) belongs in
EngagementManager.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .. import const
from ..const import EngagementStatus

# =============================================================================
# EFFECT DATA STRUCTURES
# =============================================================================


@dataclass
class ToggleEffect:
    """Planned effect of one engagement toggle for a single participant.

    Attributes:
        action: The action the participant toggled
        toggled_off: True when the participant already held ``action``
        new_status: Participant status after the toggle
        points: Tariff payable if the ActionRecord insert succeeds (toggle-on).
            Zero for toggle-off; the reversal amount comes from the deleted
            ActionRecord, not from the tariff.
    """

    action: EngagementStatus
    toggled_off: bool
    new_status: EngagementStatus
    points: int = 0


@dataclass
class AggregateResolution:
    """Entry aggregate status after a toggle.

    Attributes:
        status: New aggregate status
        changed: Whether the aggregate differs from the previous value
        set_solver: Record the toggling participant as resolver
        clear_solver: Clear resolver identity and time
    """

    status: EngagementStatus
    changed: bool
    set_solver: bool = False
    clear_solver: bool = False


@dataclass
class ToggleResult:
    """Authoritative result of a toggle, returned to the caller."""

    toggled_off: bool
    new_participant_status: EngagementStatus
    new_aggregate_status: EngagementStatus
    aggregate_changed: bool
    points_delta: int = 0

    def as_dict(self) -> dict[str, str | bool | int]:
        """Return a JSON-serializable mapping for service responses."""
        return {
            "toggled_off": self.toggled_off,
            "new_participant_status": str(self.new_participant_status),
            "new_aggregate_status": str(self.new_aggregate_status),
            "aggregate_changed": self.aggregate_changed,
            "points_delta": self.points_delta,
        }


# =============================================================================
# ENGAGEMENT ENGINE
# =============================================================================


class EngagementEngine:
    """Pure logic engine for engagement toggles.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    @staticmethod
    def is_valid_action(action: str) -> bool:
        """Return True when ``action`` is a toggleable engagement action."""
        return action in const.ENGAGEMENT_ACTIONS

    @staticmethod
    def points_for_action(action: str) -> int:
        """Return the fixed tariff for an engagement action (0 if unknown)."""
        return const.POINT_TARIFF.get(action, 0)

    @staticmethod
    def plan_toggle(
        current_status: EngagementStatus | str | None,
        action: EngagementStatus,
    ) -> ToggleEffect:
        """Plan a toggle from the participant's current status.

        A missing status row counts as UNREAD. Toggling the action the
        participant already holds returns them to UNREAD; any other action
        replaces the current status (WORKING does not require CONFIRMED first).

        Raises:
            ValueError: If ``action`` is not CONFIRMED, WORKING or SOLVED.
        """
        if not EngagementEngine.is_valid_action(action):
            raise ValueError(f"Invalid engagement action: {action}")

        current = EngagementStatus(current_status or EngagementStatus.UNREAD)
        if current == action:
            return ToggleEffect(
                action=action,
                toggled_off=True,
                new_status=EngagementStatus.UNREAD,
            )

        return ToggleEffect(
            action=action,
            toggled_off=False,
            new_status=action,
            points=EngagementEngine.points_for_action(action),
        )

    @staticmethod
    def resolve_aggregate_status(
        statuses: Iterable[EngagementStatus | str],
    ) -> EngagementStatus:
        """Derive an aggregate from participant statuses by precedence.

        WORKING beats CONFIRMED beats UNREAD. SOLVED is only ever set by an
        explicit SOLVED toggle, so it does not take part in the scan.
        """
        present = {EngagementStatus(status) for status in statuses}
        for candidate in const.AGGREGATE_PRECEDENCE:
            if candidate in present:
                return candidate
        return EngagementStatus.UNREAD

    @staticmethod
    def resolve_after_toggle(
        current_aggregate: EngagementStatus | str,
        effect: ToggleEffect,
        remaining_statuses: Iterable[EngagementStatus | str],
    ) -> AggregateResolution:
        """Resolve the entry aggregate after ``effect`` has been applied.

        Args:
            current_aggregate: Aggregate before the toggle
            effect: The applied toggle
            remaining_statuses: Non-UNREAD participant statuses for the entry
                after the toggle was persisted
        """
        current = EngagementStatus(current_aggregate or EngagementStatus.UNREAD)

        if effect.action == EngagementStatus.SOLVED:
            if not effect.toggled_off:
                return AggregateResolution(
                    status=EngagementStatus.SOLVED,
                    changed=current != EngagementStatus.SOLVED,
                    set_solver=True,
                )
            # Explicit un-solve
            status = EngagementEngine.resolve_aggregate_status(remaining_statuses)
            return AggregateResolution(
                status=status,
                changed=status != current,
                clear_solver=True,
            )

        # SOLVED is only left through an explicit un-solve
        if current == EngagementStatus.SOLVED:
            return AggregateResolution(status=current, changed=False)

        if not effect.toggled_off:
            return AggregateResolution(
                status=effect.action,
                changed=effect.action != current,
            )

        status = EngagementEngine.resolve_aggregate_status(remaining_statuses)
        return AggregateResolution(status=status, changed=status != current)

    @staticmethod
    def ledger_reason(action: str, *, reversal: bool = False) -> str:
        """Return the human-readable ledger reason for an action."""
        if reversal:
            return f"{action}{const.POINTS_REASON_REVERSAL_SUFFIX}"
        return str(action)
