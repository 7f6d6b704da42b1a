"""Engine modules for StaffBoard integration.

Contains pure computation engines (no Home Assistant imports):
- engagement_engine: Toggle planning and aggregate status resolution
- ledger_engine: Append-only point ledger rows and balance replay
- recurrence_engine: Recurring date generation and bulk validation
"""

# Use relative imports within package to avoid mypy module resolution issues
from .engagement_engine import (
    AggregateResolution,
    EngagementEngine,
    ToggleEffect,
    ToggleResult,
)
from .ledger_engine import LedgerEngine
from .recurrence_engine import (
    DailyRule,
    IntervalRule,
    InvalidRecurrenceConfigError,
    MonthlyRule,
    OrdinalWeekdayRule,
    RecurrenceEngine,
    RecurrenceRule,
    RecurrenceValidation,
    WeeklyRule,
    YearlyRule,
    generate_recurring_dates,
)

__all__ = [
    "AggregateResolution",
    "DailyRule",
    "EngagementEngine",
    "IntervalRule",
    "InvalidRecurrenceConfigError",
    "LedgerEngine",
    "MonthlyRule",
    "OrdinalWeekdayRule",
    "RecurrenceEngine",
    "RecurrenceRule",
    "RecurrenceValidation",
    "ToggleEffect",
    "ToggleResult",
    "WeeklyRule",
    "YearlyRule",
    "generate_recurring_dates",
]
