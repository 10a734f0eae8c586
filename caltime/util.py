"""Unit vocabulary and constants for caltime.

Time unit constants represent durations in milliseconds. Year and month use
average lengths (365.25 days and a twelfth of that, about 30.44 days);
everything below is exact.
"""

from enum import Enum
from typing import Literal, TypeAlias

# Time unit constants (all values in milliseconds)
MILLISECOND = 1
SECOND = 1000
MINUTE = 60000
HOUR = 3600000
DAY = 86400000
WEEK = 604800000
MONTH = 2629800000
YEAR = 31557600000


class Unit(str, Enum):
    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


UnitName: TypeAlias = Literal[
    "year", "years", "y",
    "month", "months", "M",
    "week", "weeks", "w",
    "day", "days", "d", "date",
    "hour", "hours", "h",
    "minute", "minutes", "m",
    "second", "seconds", "s",
    "millisecond", "milliseconds", "ms",
]

UnitLike: TypeAlias = Unit | UnitName

# "M" is month and "m" is minute, so lookups are case-sensitive
_ALIASES: dict[str, Unit] = {
    "year": Unit.YEAR,
    "years": Unit.YEAR,
    "y": Unit.YEAR,
    "month": Unit.MONTH,
    "months": Unit.MONTH,
    "M": Unit.MONTH,
    "week": Unit.WEEK,
    "weeks": Unit.WEEK,
    "w": Unit.WEEK,
    "day": Unit.DAY,
    "days": Unit.DAY,
    "d": Unit.DAY,
    "date": Unit.DAY,
    "hour": Unit.HOUR,
    "hours": Unit.HOUR,
    "h": Unit.HOUR,
    "minute": Unit.MINUTE,
    "minutes": Unit.MINUTE,
    "m": Unit.MINUTE,
    "second": Unit.SECOND,
    "seconds": Unit.SECOND,
    "s": Unit.SECOND,
    "millisecond": Unit.MILLISECOND,
    "milliseconds": Unit.MILLISECOND,
    "ms": Unit.MILLISECOND,
}

MS_PER_UNIT: dict[Unit, int] = {
    Unit.YEAR: YEAR,
    Unit.MONTH: MONTH,
    Unit.WEEK: WEEK,
    Unit.DAY: DAY,
    Unit.HOUR: HOUR,
    Unit.MINUTE: MINUTE,
    Unit.SECOND: SECOND,
    Unit.MILLISECOND: MILLISECOND,
}


def normalize_unit(unit: "Unit | str") -> Unit:
    """Map a unit alias ("y", "years", "M", "ms", ...) to its canonical Unit.

    Raises:
        ValueError: If the alias is not part of the vocabulary
    """
    if isinstance(unit, Unit):
        return unit
    try:
        return _ALIASES[unit]
    except (KeyError, TypeError):
        valid = ", ".join(_ALIASES)
        raise ValueError(
            f"Invalid time unit {unit!r}.\n"
            f"Valid units: {valid}\n"
            f"Note: 'M' is month and 'm' is minute."
        ) from None
