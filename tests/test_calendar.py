"""Tests for month and week grids."""

import pytest

from caltime import (
    CalendarDay,
    CalendarWeek,
    configure,
    create_time,
    get_calendar,
    get_days_in_month,
    get_days_in_year,
    get_first_day_of_month,
    get_first_day_of_week,
    get_last_day_of_month,
    get_month_calendar,
    get_week_calendar,
    get_weeks_in_year,
    is_leap_year,
)


# ========== Plain grids ==========


def test_calendar_monday_start():
    """February 2024 starts on a Thursday: three padding cells with Monday weeks."""
    grid = get_calendar(2024, 2, 1)
    assert len(grid) == 5
    assert grid[0] == [None, None, None, 1, 2, 3, 4]
    assert grid[-1] == [26, 27, 28, 29, None, None, None]


def test_calendar_sunday_start():
    grid = get_calendar(2024, 2, 0)
    assert grid[0] == [None, None, None, None, 1, 2, 3]
    assert grid[-1] == [25, 26, 27, 28, 29, None, None]


def test_calendar_rows_hold_every_day_once():
    for month in range(1, 13):
        grid = get_calendar(2023, month)
        days = [day for row in grid for day in row if day is not None]
        assert days == list(range(1, get_days_in_month(2023, month) + 1))
        assert all(len(row) == 7 for row in grid)


def test_four_week_month():
    """February 2021 starts on a Monday and fills exactly four rows."""
    grid = get_calendar(2021, 2, 1)
    assert len(grid) == 4
    assert grid[0] == [1, 2, 3, 4, 5, 6, 7]


def test_six_week_month():
    """A 30-day month starting in the last column needs six rows."""
    assert len(get_calendar(2024, 6, 0)) == 6
    assert len(get_calendar(2024, 9, 1)) == 6
    assert len(get_calendar(2024, 6, 1)) == 5


def test_calendar_uses_config_week_start():
    config = configure(week_starts_on=0)
    assert get_calendar(2024, 1, config=config)[0] == [None, 1, 2, 3, 4, 5, 6]
    assert get_calendar(2024, 1)[0] == [1, 2, 3, 4, 5, 6, 7]


def test_calendar_rejects_bad_arguments():
    with pytest.raises(ValueError, match="week_starts_on must be 0-6"):
        get_calendar(2024, 1, 7)

    with pytest.raises(ValueError, match="month must be 1-12"):
        get_calendar(2024, 13)


# ========== Month calendar ==========


def test_month_calendar_shape(utc_config):
    month = get_month_calendar(2024, 2, config=utc_config)
    assert (month.year, month.month) == (2024, 2)
    assert len(month.weeks) == 5
    assert [week.week_number for week in month.weeks] == [5, 6, 7, 8, 9]
    assert all(len(week.days) == 7 for week in month.weeks)


def test_padding_cells(utc_config):
    """Padding cells carry the neighbouring month's day and are disabled."""
    month = get_month_calendar(2024, 2, config=utc_config)
    first = month.weeks[0].days[0]
    assert first.date == 0
    assert first.time.format("YYYY-MM-DD") == "2024-01-29"
    assert not first.is_current_month
    assert first.is_disabled
    assert not first.is_weekend

    last = month.weeks[-1].days[-1]
    assert last.time.format("YYYY-MM-DD") == "2024-03-03"
    assert last.date == 0


def test_day_cells(utc_config):
    month = get_month_calendar(2024, 2, config=utc_config)
    thursday = month.weeks[0].days[3]
    assert thursday.date == 1
    assert thursday.is_current_month
    assert thursday.time.to_iso_string() == "2024-02-01T00:00:00.000Z"
    assert not thursday.is_disabled
    assert not thursday.is_weekend
    assert month.weeks[0].days[5].is_weekend
    assert month.weeks[0].days[6].is_weekend


def test_today_is_flagged(utc_config):
    """The config clock reads 2024-06-15."""
    month = get_month_calendar(2024, 6, config=utc_config)
    today = [day for week in month.weeks for day in week.days if day.is_today]
    assert [day.date for day in today] == [15]


def test_selected_and_disabled_days(utc_config):
    month = get_month_calendar(
        2024,
        6,
        selected_date="2024-06-14T18:00:00Z",
        min_date="2024-06-05",
        max_date="2024-06-25T12:00:00Z",
        disabled_dates=["2024-06-12"],
        config=utc_config,
    )
    days = {
        day.date: day
        for week in month.weeks
        for day in week.days
        if day.is_current_month
    }
    assert [number for number, day in days.items() if day.is_selected] == [14]
    disabled = sorted(number for number, day in days.items() if day.is_disabled)
    assert disabled == [1, 2, 3, 4, 12, 26, 27, 28, 29, 30]


def test_month_calendar_week_start(utc_config):
    month = get_month_calendar(2024, 2, week_starts_on=0, config=utc_config)
    assert month.weeks[0].days[4].date == 1
    assert month.weeks[0].days[0].time.format("YYYY-MM-DD") == "2024-01-28"


def test_week_numbers_follow_first_week_rule(utc_config):
    """With Jan 1st anchoring week 1, the first row of 2021 is week 1."""
    iso = get_month_calendar(2021, 1, config=utc_config)
    assert iso.weeks[0].week_number == 53
    jan_first = configure(utc_config, first_week_contains_date=1)
    assert get_month_calendar(2021, 1, config=jan_first).weeks[0].week_number == 1


def test_calendar_week_needs_seven_days(utc_config):
    day = CalendarDay(
        date=1,
        time=create_time("2024-06-01", utc_config),
        is_current_month=True,
        is_today=False,
        is_weekend=True,
    )
    with pytest.raises(ValueError, match="A week has 7 days"):
        CalendarWeek(week_number=22, days=(day,))


# ========== Week calendar ==========


def test_week_calendar(utc_config):
    days = get_week_calendar("2024-06-15T14:30:45Z", config=utc_config)
    assert [day.date for day in days] == [10, 11, 12, 13, 14, 15, 16]
    assert days[0].time.to_iso_string() == "2024-06-10T00:00:00.000Z"
    assert all(day.is_current_month for day in days)
    assert [day.is_weekend for day in days] == [False] * 5 + [True, True]
    assert [day.is_today for day in days] == [False] * 5 + [True, False]


def test_week_calendar_across_months(utc_config):
    days = get_week_calendar("2024-05-31", config=utc_config)
    assert [day.date for day in days] == [27, 28, 29, 30, 31, 1, 2]
    assert [day.is_current_month for day in days] == [True] * 5 + [False, False]


def test_week_calendar_defaults_to_now(utc_config):
    days = get_week_calendar(config=utc_config, week_starts_on=0)
    assert [day.date for day in days] == [9, 10, 11, 12, 13, 14, 15]


def test_week_calendar_of_invalid_value(utc_config):
    assert get_week_calendar("garbage", config=utc_config) == []


# ========== Helpers ==========


def test_month_boundaries(utc_config):
    assert get_first_day_of_month(2024, 2, utc_config).to_iso_string() == (
        "2024-02-01T00:00:00.000Z"
    )
    assert get_last_day_of_month(2024, 2, utc_config).to_iso_string() == (
        "2024-02-29T00:00:00.000Z"
    )
    assert get_last_day_of_month(2023, 2, utc_config).day == 28


def test_first_day_of_week(utc_config):
    monday = get_first_day_of_week("2024-06-15T14:30:45Z", config=utc_config)
    assert monday.to_iso_string() == "2024-06-10T00:00:00.000Z"
    sunday = get_first_day_of_week("2024-06-15T14:30:45Z", 0, utc_config)
    assert sunday.to_iso_string() == "2024-06-09T00:00:00.000Z"
    assert not get_first_day_of_week("garbage", config=utc_config).is_valid()


def test_first_day_of_week_in_zone(istanbul_config):
    """Midnight is taken in the configured zone."""
    monday = get_first_day_of_week("2024-06-12T12:00:00", config=istanbul_config)
    assert monday.format("YYYY-MM-DD HH:mm") == "2024-06-10 00:00"
    assert monday.to_iso_string() == "2024-06-09T21:00:00.000Z"


def test_year_helpers():
    assert get_days_in_year(2024) == 366
    assert get_days_in_year(2023) == 365
    assert get_weeks_in_year(2020) == 53
    assert get_weeks_in_year(2021) == 52
    assert is_leap_year(2000)
    assert not is_leap_year(2100)
