"""Month and week grids for calendar views.

`get_calendar` returns bare day numbers; `get_month_calendar` and
`get_week_calendar` wrap every cell in a CalendarDay carrying its Instant
and the flags a date picker needs (today, weekend, selected, disabled).
"""

from collections.abc import Iterable
from dataclasses import dataclass

from caltime import civil
from caltime.config import DEFAULT_CONFIG, Config
from caltime.instant import Instant, TimeInput, create_time
from caltime.util import Unit

is_leap_year = civil.is_leap_year


@dataclass(frozen=True, kw_only=True)
class CalendarDay:
    """One cell of a calendar grid.

    `date` is the day of the month, or 0 for cells that pad the grid with
    days of the previous or next month. `time` is always the actual day.
    """

    date: int
    time: Instant
    is_current_month: bool
    is_today: bool
    is_weekend: bool
    is_selected: bool = False
    is_disabled: bool = False


@dataclass(frozen=True, kw_only=True)
class CalendarWeek:
    week_number: int
    days: tuple[CalendarDay, ...]

    def __post_init__(self) -> None:
        if len(self.days) != 7:
            raise ValueError(f"A week has 7 days, got {len(self.days)}")


@dataclass(frozen=True, kw_only=True)
class CalendarMonth:
    year: int
    month: int
    weeks: tuple[CalendarWeek, ...]


def _week_start(week_starts_on: int | None, config: Config) -> int:
    start = config.default_week_start() if week_starts_on is None else week_starts_on
    if not (0 <= start <= 6):
        raise ValueError(
            f"week_starts_on must be 0-6, got {start!r}.\n"
            f"Hint: 0 is Sunday, 1 is Monday, 6 is Saturday.\n"
            f"  get_calendar(2024, 1, week_starts_on=0)"
        )
    return start


def _leading_padding(year: int, month: int, week_start: int) -> int:
    first_weekday = civil.weekday_from_days(civil.days_from_civil(year, month, 1))
    return (first_weekday - week_start + 7) % 7


def get_calendar(
    year: int,
    month: int,
    week_starts_on: int | None = None,
    config: Config | None = None,
) -> list[list[int | None]]:
    """Week rows of day numbers, None where the grid is padded.

    Examples:
        >>> get_calendar(2024, 1, 1)[0]  # Jan 1st 2024 was a Monday
        [1, 2, 3, 4, 5, 6, 7]
        >>> get_calendar(2024, 1, 0)[0]
        [None, 1, 2, 3, 4, 5, 6]

    Raises:
        ValueError: If month is not 1-12 or week_starts_on is not 0-6
    """
    config = config or DEFAULT_CONFIG
    start = _week_start(week_starts_on, config)
    length = civil.days_in_month(year, month)
    padding = _leading_padding(year, month, start)
    weeks = -(-(padding + length) // 7)

    grid = []
    for week in range(weeks):
        row = []
        for column in range(7):
            day = week * 7 + column - padding + 1
            row.append(day if 1 <= day <= length else None)
        grid.append(row)
    return grid


def get_month_calendar(
    year: int,
    month: int,
    *,
    week_starts_on: int | None = None,
    selected_date: TimeInput = None,
    min_date: TimeInput = None,
    max_date: TimeInput = None,
    disabled_dates: Iterable[TimeInput] = (),
    config: Config | None = None,
) -> CalendarMonth:
    """Month grid with per-day flags.

    A day is disabled when it is before `min_date`, after `max_date` or the
    same day as any of `disabled_dates`. Padding cells are always disabled
    and never today, weekend or selected.

    Example:
        >>> month = get_month_calendar(2024, 2, selected_date="2024-02-14")
        >>> [day.date for day in month.weeks[2].days if day.is_selected]
        [14]
    """
    config = config or DEFAULT_CONFIG
    start = _week_start(week_starts_on, config)
    grid = get_calendar(year, month, start, config)
    padding = _leading_padding(year, month, start)

    selected = create_time(selected_date, config) if selected_date is not None else None
    lower = create_time(min_date, config) if min_date is not None else None
    upper = create_time(max_date, config) if max_date is not None else None
    disabled = [create_time(value, config) for value in disabled_dates]

    weeks = []
    for index, row in enumerate(grid):
        days = []
        for column, number in enumerate(row):
            # Day offsets outside the month roll into the neighbouring months
            offset = index * 7 + column - padding + 1
            moment = create_time([year, month, offset], config)
            if number is None:
                days.append(
                    CalendarDay(
                        date=0,
                        time=moment,
                        is_current_month=False,
                        is_today=False,
                        is_weekend=False,
                        is_selected=False,
                        is_disabled=True,
                    )
                )
                continue
            is_disabled = (
                (lower is not None and moment.is_before(lower, Unit.DAY))
                or (upper is not None and moment.is_after(upper, Unit.DAY))
                or any(moment.is_same(other, Unit.DAY) for other in disabled)
            )
            days.append(
                CalendarDay(
                    date=number,
                    time=moment,
                    is_current_month=True,
                    is_today=moment.is_today(),
                    is_weekend=moment.is_weekend(),
                    is_selected=selected is not None
                    and moment.is_same(selected, Unit.DAY),
                    is_disabled=is_disabled,
                )
            )

        first_in_month = next(day for day in row if day is not None)
        week_number = civil.week_of_year(
            year, month, first_in_month, config.first_week_contains_date
        )
        weeks.append(CalendarWeek(week_number=week_number, days=tuple(days)))

    return CalendarMonth(year=year, month=month, weeks=tuple(weeks))


def get_week_calendar(
    value: TimeInput = None,
    week_starts_on: int | None = None,
    config: Config | None = None,
) -> list[CalendarDay]:
    """The seven days of the week containing `value`, starting at midnight.

    `is_current_month` is true for days in the same month as `value`.
    """
    config = config or DEFAULT_CONFIG
    first = get_first_day_of_week(value, week_starts_on, config)
    if not first.is_valid():
        return []
    base_month = create_time(value, config).month

    days = []
    for index in range(7):
        moment = first.add(index, Unit.DAY)
        days.append(
            CalendarDay(
                date=int(moment.day),
                time=moment,
                is_current_month=moment.month == base_month,
                is_today=moment.is_today(),
                is_weekend=moment.is_weekend(),
            )
        )
    return days


def get_days_in_month(year: int, month: int) -> int:
    """Number of days in `month` (1-12) of `year`.

    Examples:
        >>> get_days_in_month(2024, 2)
        29
        >>> get_days_in_month(1900, 2)
        28
    """
    return civil.days_in_month(year, month)


def get_first_day_of_month(
    year: int, month: int, config: Config | None = None
) -> Instant:
    return create_time({"year": year, "month": month, "day": 1}, config)


def get_last_day_of_month(
    year: int, month: int, config: Config | None = None
) -> Instant:
    """Local midnight of the last day of `month`."""
    day = civil.days_in_month(year, month)
    return create_time({"year": year, "month": month, "day": day}, config)


def get_first_day_of_week(
    value: TimeInput = None,
    week_starts_on: int | None = None,
    config: Config | None = None,
) -> Instant:
    """Midnight of the first day of the week containing `value`."""
    config = config or DEFAULT_CONFIG
    start = _week_start(week_starts_on, config)
    base = create_time(value, config)
    if not base.is_valid():
        return base
    back = (int(base.weekday) - start + 7) % 7
    return base.start_of(Unit.DAY).subtract(back, Unit.DAY)


def get_days_in_year(year: int) -> int:
    return civil.days_in_year(year)


def get_weeks_in_year(year: int, config: Config | None = None) -> int:
    """Number of weeks (52 or 53) in `year`'s week numbering."""
    config = config or DEFAULT_CONFIG
    return civil.weeks_in_year(year, config.first_week_contains_date)
