"""Recurrence Engine for StaffBoard.

Expands a single authored entry (or a recurring duty assignment) into a bounded,
ordered list of occurrence dates using a hybrid approach:
- `dateutil.rrule` for standard patterns (DAILY, WEEKLY)
- `dateutil.relativedelta` for month/year clamping (Jan 31 + 1 month = Feb 29)
- direct calendar arithmetic for "Nth weekday of the month"

Weekdays are numbered 0=Sunday .. 6=Saturday throughout.

IMPORTANT: This module must NOT import from coordinator.py or any manager.
Only import from const.py, utils, and standard/third-party libraries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from itertools import islice
from typing import Any, ClassVar

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from .. import const
from ..utils.dt_utils import dt_days_in_month, dt_parse_date, sunday_weekday

# =============================================================================
# Recurrence Rules (tagged union)
# =============================================================================


@dataclass(frozen=True)
class DailyRule:
    """Every calendar day from start to end, inclusive."""

    end_date: date
    kind: ClassVar[str] = const.RecurrenceKind.DAILY


@dataclass(frozen=True)
class WeeklyRule:
    """Every day in range whose weekday is in ``weekdays``."""

    end_date: date
    weekdays: frozenset[int] = frozenset()
    kind: ClassVar[str] = const.RecurrenceKind.WEEKLY


@dataclass(frozen=True)
class MonthlyRule:
    """Same day-of-month as the start date, clamped to month end."""

    end_date: date
    kind: ClassVar[str] = const.RecurrenceKind.MONTHLY


@dataclass(frozen=True)
class YearlyRule:
    """Same month and day as the start date, Feb 29 clamps to Feb 28."""

    end_date: date
    kind: ClassVar[str] = const.RecurrenceKind.YEARLY


@dataclass(frozen=True)
class IntervalRule:
    """Start + k * interval units. Month/year units clamp like MonthlyRule."""

    end_date: date
    interval: int = 1
    unit: str = const.IntervalUnit.DAYS
    kind: ClassVar[str] = const.RecurrenceKind.CUSTOM_INTERVAL


@dataclass(frozen=True)
class OrdinalWeekdayRule:
    """The Nth weekday of each month, for every (N, weekday) pair selected."""

    end_date: date
    weeks_of_month: frozenset[int] = frozenset()
    weekdays: frozenset[int] = frozenset()
    kind: ClassVar[str] = const.RecurrenceKind.CUSTOM_ORDINAL_WEEKDAY


RecurrenceRule = (
    DailyRule
    | WeeklyRule
    | MonthlyRule
    | YearlyRule
    | IntervalRule
    | OrdinalWeekdayRule
)


@dataclass(frozen=True)
class RecurrenceValidation:
    """Structured result of validating a bulk recurrence request.

    Attributes:
        is_valid: True when ``dates`` may be persisted
        error_key: Translation key describing the failure (None when valid)
        placeholders: Translation placeholders for the error message
        dates: Generated dates (empty when invalid)
    """

    is_valid: bool
    error_key: str | None = None
    placeholders: dict[str, str] = field(default_factory=dict)
    dates: tuple[date, ...] = ()


class InvalidRecurrenceConfigError(ValueError):
    """Raised when a recurrence config mapping cannot be turned into a rule."""

    def __init__(self, field_name: str, value: Any) -> None:
        """Initialize with the offending field and value."""
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid recurrence value for '{field_name}': {value!r}")


# =============================================================================
# Engine
# =============================================================================


class RecurrenceEngine:
    """Pure date generator for recurring entries and duty assignments.

    All methods are static - no instance state. Every call recomputes its result
    from the start date and rule, so results are deduplicated, ascending, and
    bounded by ``const.MAX_GENERATED_DATES``.
    """

    # 0=Sunday .. 6=Saturday mapped to rrule weekday objects
    SUNDAY_FIRST_TO_RRULE: ClassVar[tuple[Any, ...]] = (SU, MO, TU, WE, TH, FR, SA)

    @staticmethod
    def generate(start_date: date, rule: RecurrenceRule) -> list[date]:
        """Return all occurrence dates for ``rule`` starting at ``start_date``.

        A start date after the rule's end date yields an empty list. Generation
        stops silently at ``const.MAX_GENERATED_DATES``.
        """
        if start_date > rule.end_date:
            return []

        if isinstance(rule, DailyRule):
            dates = RecurrenceEngine._generate_rrule(start_date, rule.end_date, DAILY)
        elif isinstance(rule, WeeklyRule):
            weekdays = RecurrenceEngine._valid_weekdays(rule.weekdays)
            if not weekdays:
                weekdays = [sunday_weekday(start_date)]
            dates = RecurrenceEngine._generate_rrule(
                start_date,
                rule.end_date,
                WEEKLY,
                byweekday=[RecurrenceEngine.SUNDAY_FIRST_TO_RRULE[d] for d in weekdays],
            )
        elif isinstance(rule, MonthlyRule):
            dates = RecurrenceEngine._generate_anchored(
                start_date, rule.end_date, lambda k: relativedelta(months=k)
            )
        elif isinstance(rule, YearlyRule):
            dates = RecurrenceEngine._generate_anchored(
                start_date, rule.end_date, lambda k: relativedelta(years=k)
            )
        elif isinstance(rule, IntervalRule):
            dates = RecurrenceEngine._generate_interval(start_date, rule)
        elif isinstance(rule, OrdinalWeekdayRule):
            dates = RecurrenceEngine._generate_ordinal(start_date, rule)
        else:
            const.LOGGER.warning(
                "RecurrenceEngine.generate: Unsupported rule type %s",
                type(rule).__name__,
            )
            return []

        return sorted(set(dates))[: const.MAX_GENERATED_DATES]

    @staticmethod
    def validate(
        start_date: date,
        rule: RecurrenceRule,
        *,
        max_occurrences: int = const.MAX_BULK_OCCURRENCES,
        require_weekdays: bool = False,
        allow_empty: bool = False,
    ) -> RecurrenceValidation:
        """Validate a bulk recurrence request and return the dates to persist.

        Args:
            start_date: First candidate date
            rule: Recurrence rule
            max_occurrences: Business cap; more dates than this is an error
            require_weekdays: Reject a weekly rule with an empty weekday set
                (duty rosters always name their weekdays)
            allow_empty: Accept a request that produces no dates
        """
        if start_date > rule.end_date:
            return RecurrenceValidation(
                is_valid=False,
                error_key=const.TRANS_KEY_ERROR_INVALID_DATE_RANGE,
                placeholders={
                    "start_date": start_date.isoformat(),
                    "end_date": rule.end_date.isoformat(),
                },
            )

        if isinstance(rule, OrdinalWeekdayRule) and (
            not RecurrenceEngine._valid_weeks(rule.weeks_of_month)
            or not RecurrenceEngine._valid_weekdays(rule.weekdays)
        ):
            return RecurrenceValidation(
                is_valid=False,
                error_key=const.TRANS_KEY_ERROR_EMPTY_ORDINAL_SELECTION,
            )

        if (
            require_weekdays
            and isinstance(rule, WeeklyRule)
            and not RecurrenceEngine._valid_weekdays(rule.weekdays)
        ):
            return RecurrenceValidation(
                is_valid=False,
                error_key=const.TRANS_KEY_ERROR_EMPTY_WEEKDAYS,
            )

        dates = RecurrenceEngine.generate(start_date, rule)
        if len(dates) > max_occurrences:
            return RecurrenceValidation(
                is_valid=False,
                error_key=const.TRANS_KEY_ERROR_TOO_MANY_OCCURRENCES,
                placeholders={
                    "count": str(len(dates)),
                    "max": str(max_occurrences),
                },
            )

        if not dates and not allow_empty:
            return RecurrenceValidation(
                is_valid=False,
                error_key=const.TRANS_KEY_ERROR_NO_OCCURRENCES,
            )

        return RecurrenceValidation(is_valid=True, dates=tuple(dates))

    # -------------------------------------------------------------------------
    # Rule construction
    # -------------------------------------------------------------------------

    @staticmethod
    def rule_from_config(config: dict[str, Any]) -> RecurrenceRule | None:
        """Build a rule from a service-call style mapping.

        Keys: ``recurrence`` (kind), ``end_date``, ``weekdays``,
        ``weeks_of_month``, ``interval``, ``interval_unit``.

        Returns:
            The rule, or None when ``recurrence`` is missing or "none".

        Raises:
            InvalidRecurrenceConfigError: unknown kind, missing end date, or
                unknown interval unit.
        """
        raw_kind = config.get(const.FIELD_RECURRENCE) or const.RecurrenceKind.NONE
        try:
            kind = const.RecurrenceKind(raw_kind)
        except ValueError as err:
            raise InvalidRecurrenceConfigError(const.FIELD_RECURRENCE, raw_kind) from err

        if kind == const.RecurrenceKind.NONE:
            return None

        end_date = dt_parse_date(config.get(const.FIELD_END_DATE))
        if end_date is None:
            raise InvalidRecurrenceConfigError(
                const.FIELD_END_DATE, config.get(const.FIELD_END_DATE)
            )

        weekdays = frozenset(int(d) for d in config.get(const.FIELD_WEEKDAYS) or [])

        if kind == const.RecurrenceKind.DAILY:
            return DailyRule(end_date=end_date)
        if kind == const.RecurrenceKind.WEEKLY:
            return WeeklyRule(end_date=end_date, weekdays=weekdays)
        if kind == const.RecurrenceKind.MONTHLY:
            return MonthlyRule(end_date=end_date)
        if kind == const.RecurrenceKind.YEARLY:
            return YearlyRule(end_date=end_date)
        if kind == const.RecurrenceKind.CUSTOM_INTERVAL:
            raw_unit = config.get(const.FIELD_INTERVAL_UNIT) or const.IntervalUnit.DAYS
            try:
                unit = const.IntervalUnit(raw_unit)
            except ValueError as err:
                raise InvalidRecurrenceConfigError(
                    const.FIELD_INTERVAL_UNIT, raw_unit
                ) from err
            return IntervalRule(
                end_date=end_date,
                interval=int(config.get(const.FIELD_INTERVAL) or 1),
                unit=unit,
            )

        return OrdinalWeekdayRule(
            end_date=end_date,
            weeks_of_month=frozenset(
                int(w) for w in config.get(const.FIELD_WEEKS_OF_MONTH) or []
            ),
            weekdays=weekdays,
        )

    @staticmethod
    def rule_to_config(rule: RecurrenceRule) -> dict[str, Any]:
        """Return the JSON-safe mapping ``rule_from_config`` accepts."""
        config: dict[str, Any] = {
            const.FIELD_RECURRENCE: str(rule.kind),
            const.FIELD_END_DATE: rule.end_date.isoformat(),
        }
        if isinstance(rule, (WeeklyRule, OrdinalWeekdayRule)):
            config[const.FIELD_WEEKDAYS] = sorted(rule.weekdays)
        if isinstance(rule, OrdinalWeekdayRule):
            config[const.FIELD_WEEKS_OF_MONTH] = sorted(rule.weeks_of_month)
        if isinstance(rule, IntervalRule):
            config[const.FIELD_INTERVAL] = rule.interval
            config[const.FIELD_INTERVAL_UNIT] = str(rule.unit)
        return config

    # -------------------------------------------------------------------------
    # Generators
    # -------------------------------------------------------------------------

    @staticmethod
    def _generate_rrule(
        start_date: date, end_date: date, freq: int, **kwargs: Any
    ) -> list[date]:
        """Expand an rrule between two dates (inclusive)."""
        occurrences = rrule(
            freq,
            dtstart=datetime.combine(start_date, time.min),
            until=datetime.combine(end_date, time.min),
            **kwargs,
        )
        return [
            occurrence.date()
            for occurrence in islice(occurrences, const.MAX_GENERATED_DATES)
        ]

    @staticmethod
    def _generate_anchored(
        start_date: date, end_date: date, offset_for: Any
    ) -> list[date]:
        """Generate start + offset_for(k) for k = 0, 1, 2, ...

        Each occurrence is computed from the start date rather than the
        previous occurrence, so a clamp (Jan 31 -> Feb 29) never shifts later
        months (Mar 31 stays Mar 31). A step past the last representable date
        ends the series.
        """
        dates: list[date] = []
        for k in range(const.MAX_GENERATED_DATES):
            try:
                candidate = start_date + offset_for(k)
            except (OverflowError, ValueError):
                break
            if candidate > end_date:
                break
            dates.append(candidate)
        return dates

    @staticmethod
    def _generate_interval(start_date: date, rule: IntervalRule) -> list[date]:
        """Generate start + k * interval in the rule's unit."""
        # Invalid interval values (<=0) are coerced to 1
        interval = max(1, rule.interval)

        if rule.unit == const.IntervalUnit.MONTHS:
            return RecurrenceEngine._generate_anchored(
                start_date, rule.end_date, lambda k: relativedelta(months=k * interval)
            )
        if rule.unit == const.IntervalUnit.YEARS:
            return RecurrenceEngine._generate_anchored(
                start_date, rule.end_date, lambda k: relativedelta(years=k * interval)
            )

        step_days = interval * 7 if rule.unit == const.IntervalUnit.WEEKS else interval
        return RecurrenceEngine._generate_anchored(
            start_date, rule.end_date, lambda k: timedelta(days=k * step_days)
        )

    @staticmethod
    def _generate_ordinal(start_date: date, rule: OrdinalWeekdayRule) -> list[date]:
        """Generate the Nth weekday of every month between start and end.

        For each month and each (week, weekday) pair the date is the first
        occurrence of that weekday plus (week - 1) * 7 days. Pairs that fall past
        the month's last day contribute nothing (e.g. a month with no 5th Sunday).
        """
        weeks = RecurrenceEngine._valid_weeks(rule.weeks_of_month)
        weekdays = RecurrenceEngine._valid_weekdays(rule.weekdays)
        if not weeks or not weekdays:
            return []

        dates: list[date] = []
        year, month = start_date.year, start_date.month
        while (year, month) <= (rule.end_date.year, rule.end_date.month):
            first_of_month = date(year, month, 1)
            first_weekday = sunday_weekday(first_of_month)
            month_length = dt_days_in_month(year, month)

            for week in weeks:
                for weekday in weekdays:
                    day = 1 + (weekday - first_weekday) % 7 + (week - 1) * 7
                    if day > month_length:
                        continue
                    candidate = date(year, month, day)
                    if start_date <= candidate <= rule.end_date:
                        dates.append(candidate)

            if len(dates) >= const.MAX_GENERATED_DATES:
                break
            month += 1
            if month > 12:
                year, month = year + 1, 1

        return dates

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _valid_weekdays(weekdays: frozenset[int]) -> list[int]:
        """Filter to the valid 0..6 range, sorted."""
        return sorted(
            d for d in weekdays if const.WEEKDAY_SUNDAY <= d <= const.WEEKDAY_SATURDAY
        )

    @staticmethod
    def _valid_weeks(weeks: frozenset[int]) -> list[int]:
        """Filter to the valid 1..5 week-of-month range, sorted."""
        return sorted(
            w
            for w in weeks
            if const.WEEKS_OF_MONTH_MIN <= w <= const.WEEKS_OF_MONTH_MAX
        )


def generate_recurring_dates(start_date: date, rule: RecurrenceRule) -> list[date]:
    """Return the occurrence dates for a rule (pure, no side effects)."""
    return RecurrenceEngine.generate(start_date, rule)
