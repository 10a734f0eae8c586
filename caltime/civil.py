"""Proleptic Gregorian calendar arithmetic.

Civil dates are converted to and from day numbers counted from the Unix
epoch (1970-01-01 is day 0). All functions work on plain integers, so they
cover the whole representable range of an Instant (about +/-275,000 years),
well beyond what `datetime` supports.
"""

from dataclasses import dataclass

from caltime.util import DAY, HOUR, MINUTE, SECOND

DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
DAYS_IN_MONTH_LEAP = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Cumulative days before each month in a common year (1-indexed, slot 0 unused)
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)

# Ordinal (days since 0001-01-01, which is ordinal 1) of 1970-01-01
_EPOCH_ORDINAL = 719163


@dataclass(frozen=True)
class CivilFields:
    """Calendar fields as read on a wall clock. `weekday` is 0 (Sunday) - 6."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    weekday: int = 0


def is_leap_year(year: int) -> bool:
    """Check if a year is a leap year in the proleptic Gregorian calendar.

    Examples:
        >>> is_leap_year(2000)  # Divisible by 400
        True
        >>> is_leap_year(1900)  # Divisible by 100 but not 400
        False
        >>> is_leap_year(2024)
        True
    """
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a month (1-12).

    Raises:
        ValueError: If month is not in 1-12
    """
    if not (1 <= month <= 12):
        raise ValueError(f"month must be 1-12, got {month}")
    table = DAYS_IN_MONTH_LEAP if is_leap_year(year) else DAYS_IN_MONTH
    return table[month - 1]


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_from_civil(year: int, month: int, day: int) -> int:
    """Convert a civil date to days since 1970-01-01.

    Floor division keeps the formula valid for years <= 0.
    """
    y = year - 1
    days_before_year = y * 365 + y // 4 - y // 100 + y // 400
    days_before_month = _DAYS_BEFORE_MONTH[month]
    if month > 2 and is_leap_year(year):
        days_before_month += 1
    return days_before_year + days_before_month + day - _EPOCH_ORDINAL


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Convert days since 1970-01-01 to (year, month, day).

    Works in 400-year eras starting on March 1st so that the leap day is the
    last day of each shifted year.
    """
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def weekday_from_days(days: int) -> int:
    """Day of week for a day number, 0 = Sunday. 1970-01-01 was a Thursday."""
    return (days + 4) % 7


def decode(local_ms: int) -> CivilFields:
    """Split wall-clock milliseconds since epoch into civil fields."""
    days, ms_of_day = divmod(local_ms, DAY)
    year, month, day = civil_from_days(days)
    hour, rest = divmod(ms_of_day, HOUR)
    minute, rest = divmod(rest, MINUTE)
    second, millisecond = divmod(rest, SECOND)
    return CivilFields(
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        millisecond=millisecond,
        weekday=weekday_from_days(days),
    )


def encode(
    year: int,
    month: int,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Join civil fields into wall-clock milliseconds since epoch.

    Out-of-range fields overflow into the next larger unit instead of failing:
    month 13 is January of the next year, day 31 of a 30-day month is the 1st
    of the next month, hour -1 is 23:00 of the previous day.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    days = days_from_civil(year, month, 1) + day - 1
    return days * DAY + hour * HOUR + minute * MINUTE + second * SECOND + millisecond


def day_of_year(year: int, month: int, day: int) -> int:
    return days_from_civil(year, month, day) - days_from_civil(year, 1, 1) + 1


def quarter(month: int) -> int:
    return (month - 1) // 3 + 1


def _first_week_monday(year: int, first_week_contains_date: int) -> int:
    anchor = days_from_civil(year, 1, first_week_contains_date)
    return anchor - (weekday_from_days(anchor) + 6) % 7


def week_of_year(
    year: int, month: int, day: int, first_week_contains_date: int = 4
) -> int:
    """Week number with Monday-based weeks.

    Week 1 is the week holding January `first_week_contains_date`; with the
    default of 4 this is the ISO-8601 week number. Days before week 1 belong
    to the last week of the previous year, and days on or after week 1 of the
    next year belong to it.
    """
    days = days_from_civil(year, month, day)
    monday = days - (weekday_from_days(days) + 6) % 7
    for candidate in (year + 1, year, year - 1):
        first = _first_week_monday(candidate, first_week_contains_date)
        if monday >= first:
            return (monday - first) // 7 + 1
    raise AssertionError("unreachable: a date always falls in some week-year")


def weeks_in_year(year: int, first_week_contains_date: int = 4) -> int:
    """Number of weeks (52 or 53) in the week-numbering year."""
    this_year = _first_week_monday(year, first_week_contains_date)
    next_year = _first_week_monday(year + 1, first_week_contains_date)
    return (next_year - this_year) // 7


def week_start(days: int, week_starts_on: int) -> int:
    """Day number of the first day of the week containing `days`."""
    return days - (weekday_from_days(days) - week_starts_on + 7) % 7
