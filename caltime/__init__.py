from .calendar import (
    CalendarDay,
    CalendarMonth,
    CalendarWeek,
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
from .config import DEFAULT_CONFIG, Config, Thresholds, configure
from .duration import Duration, create_duration, format_duration, humanize_duration
from .instant import Instant, create_time, is_valid, now, parse, today, unix
from .locales import EN, TR, Locale, LocaleRegistry
from .relative import format_relative
from .util import DAY, HOUR, MILLISECOND, MINUTE, MONTH, SECOND, WEEK, YEAR, Unit
from .zones import (
    DateutilResolver,
    FixedOffsetResolver,
    UnknownTimezoneError,
    ZoneInfoResolver,
    ZoneResolver,
    create_time_in_zone,
    get_timezone_offset,
    get_timezones,
)

__all__ = [
    "Instant",
    "Duration",
    "Config",
    "Thresholds",
    "Unit",
    "Locale",
    "LocaleRegistry",
    "EN",
    "TR",
    "ZoneResolver",
    "ZoneInfoResolver",
    "DateutilResolver",
    "FixedOffsetResolver",
    "UnknownTimezoneError",
    "CalendarDay",
    "CalendarWeek",
    "CalendarMonth",
    "DEFAULT_CONFIG",
    "configure",
    "create_time",
    "now",
    "today",
    "unix",
    "is_valid",
    "parse",
    "create_duration",
    "format_duration",
    "humanize_duration",
    "format_relative",
    "get_calendar",
    "get_month_calendar",
    "get_week_calendar",
    "get_days_in_month",
    "get_days_in_year",
    "get_weeks_in_year",
    "get_first_day_of_month",
    "get_last_day_of_month",
    "get_first_day_of_week",
    "is_leap_year",
    "get_timezones",
    "get_timezone_offset",
    "create_time_in_zone",
    "YEAR",
    "MONTH",
    "WEEK",
    "DAY",
    "HOUR",
    "MINUTE",
    "SECOND",
    "MILLISECOND",
]
