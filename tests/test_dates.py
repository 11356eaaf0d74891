"""Tests for calendar helpers and the year partition."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from habitgrid.services.dates import (
    as_utc,
    end_of_week,
    format_date_key,
    is_within_week,
    month_label_positions,
    parse_date_key,
    start_of_week,
    today_key,
    utc_now,
    weekday_of,
    weeks_of_year,
    year_dates,
)


class TestDateKeys:
    def test_format_zero_pads(self):
        assert format_date_key(date(2024, 3, 6)) == "2024-03-06"

    def test_parse_canonical_key(self):
        assert parse_date_key("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("bad", ["2024-3-6", "2024-02-30", "06-03-2024", "", "2024-03-06T10:00"])
    def test_parse_rejects_non_canonical_keys(self, bad):
        with pytest.raises(ValueError):
            parse_date_key(bad)

    def test_today_key_uses_injected_clock(self):
        assert today_key(lambda: date(2023, 12, 31)) == "2023-12-31"


class TestWeekBoundaries:
    def test_weekday_is_sunday_based(self):
        assert weekday_of(date(2024, 3, 3)) == 0  # Sunday
        assert weekday_of(date(2024, 3, 4)) == 1  # Monday
        assert weekday_of(date(2024, 3, 9)) == 6  # Saturday

    def test_week_runs_sunday_to_saturday(self):
        wednesday = date(2024, 3, 6)
        assert start_of_week(wednesday) == date(2024, 3, 3)
        assert end_of_week(wednesday) == date(2024, 3, 9)

    def test_sunday_starts_its_own_week(self):
        sunday = date(2024, 3, 3)
        assert start_of_week(sunday) == sunday

    def test_week_crosses_year_boundary(self):
        assert start_of_week(date(2024, 1, 1)) == date(2023, 12, 31)

    def test_is_within_week_is_inclusive(self):
        anchor = date(2024, 3, 6)
        assert is_within_week(date(2024, 3, 3), anchor)
        assert is_within_week(date(2024, 3, 9), anchor)
        assert not is_within_week(date(2024, 3, 2), anchor)
        assert not is_within_week(date(2024, 3, 10), anchor)


class TestWeeksOfYear:
    def test_leap_year_has_366_populated_days(self):
        weeks = weeks_of_year(2024)
        populated = [d for week in weeks for d in week if d is not None]
        assert len(populated) == 366
        assert populated == year_dates(2024)

    def test_first_row_is_left_padded_to_weekday(self):
        weeks = weeks_of_year(2024)
        first = weeks[0]
        pad = weekday_of(date(2024, 1, 1))
        assert first[:pad] == [None] * pad
        assert first[pad] == date(2024, 1, 1)
        assert len(first) == 7

    def test_final_row_is_not_padded(self):
        weeks = weeks_of_year(2024)
        # Dec 31 2024 is a Tuesday
        assert weeks[-1] == [date(2024, 12, 29), date(2024, 12, 30), date(2024, 12, 31)]
        assert len(weeks) == 53
        assert all(len(week) == 7 for week in weeks[:-1])

    def test_year_starting_on_sunday_has_no_padding(self):
        weeks = weeks_of_year(2023)
        assert weeks[0][0] == date(2023, 1, 1)
        assert weeks[-1] == [date(2023, 12, 31)]

    def test_slot_index_matches_weekday(self):
        for week in weeks_of_year(2025):
            for index, day in enumerate(week):
                if day is not None:
                    assert weekday_of(day) == index

    def test_is_deterministic(self):
        assert weeks_of_year(2024) == weeks_of_year(2024)


class TestMonthLabels:
    def test_labels_follow_first_populated_day_of_each_row(self):
        positions = month_label_positions(weeks_of_year(2024))
        assert positions[0] == (1, 0)
        # Row 4 starts Sunday Jan 28, so February's label lands on row 5 (Feb 4).
        assert positions[1] == (2, 5)
        assert [month for month, _ in positions] == list(range(1, 13))

    def test_empty_input(self):
        assert month_label_positions([]) == []


class TestUtcTimestamps:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is timezone.utc

    def test_offset_less_value_taken_as_utc(self):
        assert as_utc(datetime(2024, 3, 6, 9, 0)) == datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)

    def test_other_offsets_converted(self):
        plus_two = timezone(timedelta(hours=2))
        converted = as_utc(datetime(2024, 3, 6, 11, 0, tzinfo=plus_two))
        assert converted.tzinfo is timezone.utc
        assert converted.hour == 9
