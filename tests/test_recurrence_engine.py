"""Unit tests for RecurrenceEngine - pure Python date generation.

These tests verify occurrence generation without any Home Assistant mocking.

Test Categories:
- Daily / weekly expansion (0=Sunday weekday numbering)
- Month-end clamping anchored on the start date
- Nth weekday of the month
- Bulk validation (range, selection, caps)
- Rule construction from service-call mappings
"""

from __future__ import annotations

from datetime import date

import pytest

from custom_components.staffboard import const
from custom_components.staffboard.engines.recurrence_engine import (
    DailyRule,
    IntervalRule,
    InvalidRecurrenceConfigError,
    MonthlyRule,
    OrdinalWeekdayRule,
    RecurrenceEngine,
    WeeklyRule,
    YearlyRule,
    generate_recurring_dates,
)

# =============================================================================
# Test: Generation
# =============================================================================


class TestGenerateDailyWeekly:
    """Tests for daily and weekly rules."""

    def test_daily_inclusive_range(self) -> None:
        """Daily rule includes both the start and the end date."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 30), DailyRule(end_date=date(2024, 2, 2))
        )
        assert dates == [
            date(2024, 1, 30),
            date(2024, 1, 31),
            date(2024, 2, 1),
            date(2024, 2, 2),
        ]

    def test_start_after_end_is_empty(self) -> None:
        """A start date after the end date yields no dates."""
        assert (
            RecurrenceEngine.generate(
                date(2024, 3, 10), DailyRule(end_date=date(2024, 3, 1))
            )
            == []
        )

    def test_weekly_monday_wednesday(self) -> None:
        """Weekdays use 0=Sunday numbering: 1=Monday, 3=Wednesday."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 1),
            WeeklyRule(end_date=date(2024, 1, 14), weekdays=frozenset({1, 3})),
        )
        assert dates == [
            date(2024, 1, 1),
            date(2024, 1, 3),
            date(2024, 1, 8),
            date(2024, 1, 10),
        ]

    def test_weekly_sunday_is_zero(self) -> None:
        """Weekday 0 selects Sundays."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 1),
            WeeklyRule(end_date=date(2024, 1, 21), weekdays=frozenset({0})),
        )
        assert dates == [date(2024, 1, 7), date(2024, 1, 14), date(2024, 1, 21)]

    def test_weekly_empty_weekdays_uses_start_weekday(self) -> None:
        """An empty weekday set repeats on the start date's weekday."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 3),
            WeeklyRule(end_date=date(2024, 1, 20)),
        )
        assert dates == [date(2024, 1, 3), date(2024, 1, 10), date(2024, 1, 17)]

    def test_module_function_matches_engine(self) -> None:
        """The module-level helper delegates to the engine."""
        rule = DailyRule(end_date=date(2024, 1, 3))
        assert generate_recurring_dates(date(2024, 1, 1), rule) == (
            RecurrenceEngine.generate(date(2024, 1, 1), rule)
        )


class TestGenerateMonthlyYearly:
    """Tests for month and year clamping."""

    def test_monthly_clamps_without_drift(self) -> None:
        """Jan 31 clamps to Feb 29 but March returns to the 31st."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 31), MonthlyRule(end_date=date(2024, 4, 30))
        )
        assert dates == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_yearly_leap_day_clamps(self) -> None:
        """Feb 29 clamps to Feb 28 in non-leap years and returns in 2028."""
        dates = RecurrenceEngine.generate(
            date(2024, 2, 29), YearlyRule(end_date=date(2028, 3, 1))
        )
        assert dates == [
            date(2024, 2, 29),
            date(2025, 2, 28),
            date(2026, 2, 28),
            date(2027, 2, 28),
            date(2028, 2, 29),
        ]

    def test_interval_days(self) -> None:
        """Every third day."""
        dates = RecurrenceEngine.generate(
            date(2024, 5, 1),
            IntervalRule(
                end_date=date(2024, 5, 10),
                interval=3,
                unit=const.IntervalUnit.DAYS,
            ),
        )
        assert dates == [
            date(2024, 5, 1),
            date(2024, 5, 4),
            date(2024, 5, 7),
            date(2024, 5, 10),
        ]

    def test_interval_weeks(self) -> None:
        """Every two weeks."""
        dates = RecurrenceEngine.generate(
            date(2024, 5, 1),
            IntervalRule(
                end_date=date(2024, 6, 1),
                interval=2,
                unit=const.IntervalUnit.WEEKS,
            ),
        )
        assert dates == [date(2024, 5, 1), date(2024, 5, 15), date(2024, 5, 29)]

    def test_interval_months_clamps(self) -> None:
        """Every two months from Aug 31 clamps on short months."""
        dates = RecurrenceEngine.generate(
            date(2023, 8, 31),
            IntervalRule(
                end_date=date(2024, 3, 1),
                interval=2,
                unit=const.IntervalUnit.MONTHS,
            ),
        )
        assert dates == [
            date(2023, 8, 31),
            date(2023, 10, 31),
            date(2023, 12, 31),
            date(2024, 2, 29),
        ]

    def test_interval_zero_is_coerced_to_one(self) -> None:
        """A non-positive interval behaves like 1."""
        dates = RecurrenceEngine.generate(
            date(2024, 5, 1),
            IntervalRule(end_date=date(2024, 5, 3), interval=0),
        )
        assert dates == [date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)]


class TestGenerateOrdinal:
    """Tests for the Nth-weekday-of-month rule."""

    def test_fifth_sunday_only_in_months_that_have_one(self) -> None:
        """Only March 2024 has a fifth Sunday between January and April."""
        dates = RecurrenceEngine.generate(
            date(2024, 1, 1),
            OrdinalWeekdayRule(
                end_date=date(2024, 4, 30),
                weeks_of_month=frozenset({5}),
                weekdays=frozenset({0}),
            ),
        )
        assert dates == [date(2024, 3, 31)]

    def test_first_and_third_tuesday(self) -> None:
        """Two ordinal weeks combine into one sorted list."""
        dates = RecurrenceEngine.generate(
            date(2024, 6, 1),
            OrdinalWeekdayRule(
                end_date=date(2024, 7, 31),
                weeks_of_month=frozenset({1, 3}),
                weekdays=frozenset({2}),
            ),
        )
        assert dates == [
            date(2024, 6, 4),
            date(2024, 6, 18),
            date(2024, 7, 2),
            date(2024, 7, 16),
        ]

    def test_dates_before_start_are_skipped(self) -> None:
        """An occurrence earlier in the start month is not generated."""
        dates = RecurrenceEngine.generate(
            date(2024, 6, 10),
            OrdinalWeekdayRule(
                end_date=date(2024, 6, 30),
                weeks_of_month=frozenset({1}),
                weekdays=frozenset({2}),
            ),
        )
        assert dates == []

    def test_out_of_range_selections_ignored(self) -> None:
        """Weeks outside 1..5 and weekdays outside 0..6 contribute nothing."""
        dates = RecurrenceEngine.generate(
            date(2024, 6, 1),
            OrdinalWeekdayRule(
                end_date=date(2024, 6, 30),
                weeks_of_month=frozenset({0, 6}),
                weekdays=frozenset({7}),
            ),
        )
        assert dates == []


class TestGenerateCap:
    """Tests for the internal generation cap."""

    def test_daily_capped_at_max_generated(self) -> None:
        """Generation stops at MAX_GENERATED_DATES."""
        dates = RecurrenceEngine.generate(
            date(2000, 1, 1), DailyRule(end_date=date(2010, 1, 1))
        )
        assert len(dates) == const.MAX_GENERATED_DATES
        assert dates == sorted(dates)
        assert len(set(dates)) == len(dates)

    @pytest.mark.parametrize(
        ("interval", "unit"),
        [
            (4_000_000, const.IntervalUnit.DAYS),
            (600_000, const.IntervalUnit.WEEKS),
            (200_000, const.IntervalUnit.MONTHS),
            (20_000, const.IntervalUnit.YEARS),
        ],
    )
    def test_huge_interval_stops_at_calendar_limit(
        self, interval: int, unit: str
    ) -> None:
        """A step past year 9999 ends the series instead of raising."""
        rule = IntervalRule(end_date=date(2024, 12, 31), interval=interval, unit=unit)

        assert generate_recurring_dates(date(2024, 1, 1), rule) == [date(2024, 1, 1)]
        assert RecurrenceEngine.validate(date(2024, 1, 1), rule).dates == (
            date(2024, 1, 1),
        )

    def test_monthly_and_yearly_near_max_date(self) -> None:
        """Rules ending on 9999-12-31 stop at the last representable step."""
        assert generate_recurring_dates(
            date(9999, 11, 30), MonthlyRule(end_date=date(9999, 12, 31))
        ) == [date(9999, 11, 30), date(9999, 12, 30)]
        assert generate_recurring_dates(
            date(9998, 2, 1), YearlyRule(end_date=date(9999, 12, 31))
        ) == [date(9998, 2, 1), date(9999, 2, 1)]


# =============================================================================
# Test: Validation
# =============================================================================


class TestValidate:
    """Tests for bulk recurrence validation."""

    def test_valid_request_returns_dates(self) -> None:
        """A valid request carries its dates."""
        result = RecurrenceEngine.validate(
            date(2024, 1, 1),
            WeeklyRule(end_date=date(2024, 1, 14), weekdays=frozenset({1, 3})),
        )
        assert result.is_valid
        assert result.error_key is None
        assert len(result.dates) == 4

    def test_invalid_date_range(self) -> None:
        """Start after end is reported with both dates."""
        result = RecurrenceEngine.validate(
            date(2024, 2, 1), DailyRule(end_date=date(2024, 1, 1))
        )
        assert not result.is_valid
        assert result.error_key == const.TRANS_KEY_ERROR_INVALID_DATE_RANGE
        assert result.placeholders == {
            "start_date": "2024-02-01",
            "end_date": "2024-01-01",
        }

    def test_three_years_of_two_weekdays_is_rejected(self) -> None:
        """Roughly 312 dates exceed the bulk cap of 100."""
        result = RecurrenceEngine.validate(
            date(2024, 1, 1),
            WeeklyRule(end_date=date(2026, 12, 31), weekdays=frozenset({1, 4})),
        )
        assert not result.is_valid
        assert result.error_key == const.TRANS_KEY_ERROR_TOO_MANY_OCCURRENCES
        assert int(result.placeholders["count"]) > const.MAX_BULK_OCCURRENCES
        assert result.placeholders["max"] == str(const.MAX_BULK_OCCURRENCES)
        assert result.dates == ()

    def test_exactly_at_cap_is_accepted(self) -> None:
        """100 daily dates are still allowed."""
        result = RecurrenceEngine.validate(
            date(2024, 1, 1), DailyRule(end_date=date(2024, 4, 9))
        )
        assert result.is_valid
        assert len(result.dates) == const.MAX_BULK_OCCURRENCES

    def test_empty_ordinal_selection(self) -> None:
        """Ordinal rule with no weeks is rejected."""
        result = RecurrenceEngine.validate(
            date(2024, 1, 1),
            OrdinalWeekdayRule(
                end_date=date(2024, 3, 1), weekdays=frozenset({1})
            ),
        )
        assert not result.is_valid
        assert result.error_key == const.TRANS_KEY_ERROR_EMPTY_ORDINAL_SELECTION

    def test_empty_weekdays_when_required(self) -> None:
        """Weekly rule without weekdays is rejected when weekdays are required."""
        result = RecurrenceEngine.validate(
            date(2024, 1, 1),
            WeeklyRule(end_date=date(2024, 2, 1)),
            require_weekdays=True,
        )
        assert not result.is_valid
        assert result.error_key == const.TRANS_KEY_ERROR_EMPTY_WEEKDAYS

    def test_no_occurrences(self) -> None:
        """A request producing nothing is rejected unless empty is allowed."""
        rule = OrdinalWeekdayRule(
            end_date=date(2024, 2, 29),
            weeks_of_month=frozenset({5}),
            weekdays=frozenset({0}),
        )
        result = RecurrenceEngine.validate(date(2024, 2, 1), rule)
        assert not result.is_valid
        assert result.error_key == const.TRANS_KEY_ERROR_NO_OCCURRENCES

        allowed = RecurrenceEngine.validate(date(2024, 2, 1), rule, allow_empty=True)
        assert allowed.is_valid
        assert allowed.dates == ()


# =============================================================================
# Test: Rule construction
# =============================================================================


class TestRuleFromConfig:
    """Tests for building rules from service-call mappings."""

    def test_none_and_missing_kind(self) -> None:
        """No recurrence means a single-date request."""
        assert RecurrenceEngine.rule_from_config({}) is None
        assert RecurrenceEngine.rule_from_config({"recurrence": "none"}) is None

    def test_weekly_from_strings(self) -> None:
        """Weekday strings from selectors are coerced to ints."""
        rule = RecurrenceEngine.rule_from_config(
            {
                "recurrence": "weekly",
                "end_date": "2024-01-14",
                "weekdays": ["1", "3"],
            }
        )
        assert rule == WeeklyRule(
            end_date=date(2024, 1, 14), weekdays=frozenset({1, 3})
        )

    def test_custom_interval(self) -> None:
        """Interval and unit are carried over."""
        rule = RecurrenceEngine.rule_from_config(
            {
                "recurrence": "custom_interval",
                "end_date": date(2024, 12, 31),
                "interval": 2,
                "interval_unit": "weeks",
            }
        )
        assert rule == IntervalRule(
            end_date=date(2024, 12, 31), interval=2, unit=const.IntervalUnit.WEEKS
        )

    def test_ordinal(self) -> None:
        """Ordinal weeks and weekdays are carried over."""
        rule = RecurrenceEngine.rule_from_config(
            {
                "recurrence": "custom_ordinal_weekday",
                "end_date": "2024/12/31",
                "weeks_of_month": [1, 3],
                "weekdays": [2],
            }
        )
        assert rule == OrdinalWeekdayRule(
            end_date=date(2024, 12, 31),
            weeks_of_month=frozenset({1, 3}),
            weekdays=frozenset({2}),
        )

    @pytest.mark.parametrize(
        "config",
        [
            {"recurrence": "fortnightly", "end_date": "2024-01-01"},
            {"recurrence": "daily"},
            {
                "recurrence": "custom_interval",
                "end_date": "2024-01-01",
                "interval_unit": "hours",
            },
        ],
    )
    def test_invalid_config_raises(self, config: dict) -> None:
        """Unknown kind, missing end date, or unknown unit raise."""
        with pytest.raises(InvalidRecurrenceConfigError):
            RecurrenceEngine.rule_from_config(config)
