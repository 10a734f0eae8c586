"""The Instant value: a point in time viewed under a UTC offset.

An Instant stores milliseconds since the Unix epoch, the UTC offset (in
minutes) used to read calendar fields, and an optional IANA zone name. The
offset is fixed when the value is built or converted; civil fields are
always `epoch_ms + offset` read as UTC, so no getter touches the host zone.

Invalid values (unparseable input, out-of-range timestamps or offsets) are
ordinary Instants whose `epoch_ms` is NaN. Every derived operation on them
returns NaN, False or "Invalid Date" instead of raising.
"""

import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from functools import cached_property
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from dateutil import tz

from caltime import civil
from caltime.civil import CivilFields, decode, encode
from caltime.config import DEFAULT_CONFIG, Config
from caltime.formatter import TokenValue, expand, pad, render
from caltime.relative import format_relative
from caltime.util import (
    DAY,
    MINUTE,
    MONTH,
    MS_PER_UNIT,
    SECOND,
    Unit,
    UnitLike,
    normalize_unit,
)
from caltime.zones import format_offset, host_offset, is_valid_offset, parse_offset

if TYPE_CHECKING:
    from caltime.duration import Duration

logger = logging.getLogger(__name__)

MAX_EPOCH_MS = 8_640_000_000_000_000
INVALID_DATE = "Invalid Date"

Inclusivity: TypeAlias = Literal["()", "[]", "[)", "(]"]
TimeInput: TypeAlias = (
    "Instant | int | float | datetime | date | str | Mapping[str, int] "
    "| Sequence[int] | None"
)

LONG_FORMATS = ("LT", "LTS", "L", "LL", "LLL", "LLLL")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_ISO_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,3}))?(Z|([+-])(\d{2}):?(\d{2}))?)?$",
    re.IGNORECASE,
)
_NUMERIC_DATE_PATTERN = re.compile(r"^(\d{1,2})[-./](\d{1,2})[-./](\d{4})$")
_MONTH_NAME_PATTERN = re.compile(r"^([A-Za-z]+)\s+(\d{1,2}),?\s+(\d{4})$")

# English only: string parsing does not depend on the configured locale
_MONTH_NUMBERS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

_FIELD_NAMES = ("year", "month", "day", "hour", "minute", "second", "millisecond")
_FIELD_UNITS = {
    Unit.YEAR: "year",
    Unit.MONTH: "month",
    Unit.DAY: "day",
    Unit.HOUR: "hour",
    Unit.MINUTE: "minute",
    Unit.SECOND: "second",
    Unit.MILLISECOND: "millisecond",
}


def local_offset(epoch_ms: int, config: Config) -> int:
    """Offset of the configured "local" zone at `epoch_ms`.

    That is `config.timezone` when set, otherwise the host zone.

    Raises:
        UnknownTimezoneError: If config.timezone cannot be resolved
    """
    if config.timezone:
        return config.resolver.offset(config.timezone, epoch_ms)
    return host_offset(epoch_ms)


def _from_wall_clock(wall_ms: int, config: Config) -> "Instant":
    # First guess with the offset at the wall time, then correct with the
    # offset at the resulting instant so DST transitions are respected
    offset = local_offset(wall_ms, config)
    offset = local_offset(wall_ms - offset * MINUTE, config)
    epoch_ms = wall_ms - offset * MINUTE
    actual = local_offset(epoch_ms, config)
    if actual != offset:
        # Wall time inside a DST gap: read it with the offset from before the
        # gap, which lands just past the transition
        epoch_ms = wall_ms - min(offset, actual) * MINUTE
        offset = local_offset(epoch_ms, config)
    return Instant(epoch_ms, offset, config.timezone, config)


def _whole(value: Any) -> int | None:
    """Integer value of a finite number, truncated toward zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _in_range(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> bool:
    return (
        1 <= month <= 12
        and 1 <= day <= civil.days_in_month(year, month)
        and 0 <= hour <= 23
        and 0 <= minute <= 59
        and 0 <= second <= 59
    )


@dataclass(frozen=True, eq=False)
class Instant:
    """An instant in time plus the offset used to read its calendar fields.

    Build values with `create_time`; the constructor takes the raw parts.
    Equality and ordering compare the instant only, so the same moment seen
    in two zones is equal. Invalid values are never equal to anything.

    Examples:
        >>> t = create_time("2021-06-15T14:30:45+03:00")
        >>> t.hour, t.offset
        (14, 180)
        >>> t.utc().hour
        11
        >>> t == t.utc()
        True
    """

    epoch_ms: int | float
    offset: int = 0
    zone: str | None = None
    config: Config = field(default=DEFAULT_CONFIG, repr=False)

    def __post_init__(self) -> None:
        ms = _whole(self.epoch_ms)
        offset = self.offset
        valid = (
            ms is not None
            and abs(ms) <= MAX_EPOCH_MS
            and isinstance(offset, (int, float))
            and not isinstance(offset, bool)
            and is_valid_offset(offset)
        )
        if valid:
            object.__setattr__(self, "epoch_ms", ms)
            object.__setattr__(self, "offset", int(offset))
        else:
            object.__setattr__(self, "epoch_ms", math.nan)
            object.__setattr__(self, "offset", 0)
            object.__setattr__(self, "zone", None)

    # ========== Construction helpers ==========

    def _derive(self, epoch_ms: int | float) -> "Instant":
        """Same offset, zone and config at another instant."""
        return Instant(epoch_ms, self.offset, self.zone, self.config)

    def _invalid(self) -> "Instant":
        return Instant(math.nan, 0, None, self.config)

    def _coerce(self, value: TimeInput) -> "Instant":
        return create_time(value, self.config)

    def _now(self) -> "Instant":
        """Current instant viewed under this value's offset."""
        return self._derive(self.config.clock())

    @cached_property
    def _fields(self) -> CivilFields | None:
        if not self.is_valid():
            return None
        return decode(self.epoch_ms + self.offset * MINUTE)

    def _field(self, name: str) -> int | float:
        fields = self._fields
        return math.nan if fields is None else getattr(fields, name)

    # ========== Validity and equality ==========

    def is_valid(self) -> bool:
        return not (isinstance(self.epoch_ms, float) and math.isnan(self.epoch_ms))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.is_valid() and other.is_valid() and self.epoch_ms == other.epoch_ms

    def __hash__(self) -> int:
        return hash(self.epoch_ms)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_ms < other.epoch_ms

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_ms <= other.epoch_ms

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_ms > other.epoch_ms

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_ms >= other.epoch_ms

    def __int__(self) -> int:
        if not self.is_valid():
            raise ValueError(
                "Invalid Date has no integer value.\n"
                "Hint: check is_valid() before converting, or use to_timestamp() "
                "which returns NaN for invalid values."
            )
        return int(self.epoch_ms)

    def __str__(self) -> str:
        return self.to_string()

    # ========== Getters ==========

    @property
    def year(self) -> int | float:
        return self._field("year")

    @property
    def month(self) -> int | float:
        """Month of the year, 1-12."""
        return self._field("month")

    @property
    def day(self) -> int | float:
        """Day of the month, 1-31."""
        return self._field("day")

    @property
    def weekday(self) -> int | float:
        """Day of the week, 0 (Sunday) - 6 (Saturday)."""
        return self._field("weekday")

    @property
    def hour(self) -> int | float:
        return self._field("hour")

    @property
    def minute(self) -> int | float:
        return self._field("minute")

    @property
    def second(self) -> int | float:
        return self._field("second")

    @property
    def millisecond(self) -> int | float:
        return self._field("millisecond")

    @property
    def timezone_name(self) -> str:
        """Zone name, or "UTC" / "UTC+0530" when only an offset is known."""
        if not self.is_valid():
            return INVALID_DATE
        if self.zone:
            return self.zone
        if self.offset == 0:
            return "UTC"
        return f"UTC{format_offset(self.offset, colon=False)}"

    def get(self, unit: UnitLike) -> int | float:
        """Read one field by unit name; "week" is the week of the year."""
        normalized = normalize_unit(unit)
        if normalized is Unit.WEEK:
            return self.week_of_year()
        return self._field(_FIELD_UNITS[normalized])

    # ========== Setters ==========

    def _with_fields(self, changes: Mapping[str, Any]) -> "Instant":
        fields = self._fields
        if fields is None:
            return self._invalid()
        values = {name: getattr(fields, name) for name in _FIELD_NAMES}
        for name, value in changes.items():
            whole = _whole(value)
            if whole is None:
                return self._invalid()
            values[name] = whole
        return self._derive(encode(**values) - self.offset * MINUTE)

    def set(
        self,
        unit: "UnitLike | Mapping[str, int] | None" = None,
        value: int | None = None,
        **fields: int,
    ) -> "Instant":
        """Return a copy with one or more calendar fields replaced.

        Fields that overflow roll into the next unit (day 31 of a 30-day
        month is the 1st of the next month). "week" moves to that week of
        the year, keeping the weekday and time of day.

        Examples:
            >>> t = create_time("2024-04-10T08:00:00Z")
            >>> t.set("day", 31).format("YYYY-MM-DD")
            '2024-05-01'
            >>> t.set(year=2025, month=1).format("YYYY-MM-DD")
            '2025-01-10'
        """
        changes: dict[str, Any] = {}
        if isinstance(unit, Mapping):
            changes.update(unit)
        elif unit is not None:
            if value is None:
                return self.clone()
            changes[unit] = value
        changes.update(fields)

        week = None
        by_field: dict[str, Any] = {}
        for name, amount in changes.items():
            normalized = normalize_unit(name)
            if normalized is Unit.WEEK:
                week = amount
            else:
                by_field[_FIELD_UNITS[normalized]] = amount

        result = self._with_fields(by_field) if by_field else self.clone()
        if week is not None:
            target = _whole(week)
            if target is None or not result.is_valid():
                return self._invalid()
            result = result.add(target - result.week_of_year(), Unit.WEEK)
        return result

    def set_year(self, value: int) -> "Instant":
        return self._with_fields({"year": value})

    def set_month(self, value: int) -> "Instant":
        return self._with_fields({"month": value})

    def set_day(self, value: int) -> "Instant":
        return self._with_fields({"day": value})

    def set_hour(self, value: int) -> "Instant":
        return self._with_fields({"hour": value})

    def set_minute(self, value: int) -> "Instant":
        return self._with_fields({"minute": value})

    def set_second(self, value: int) -> "Instant":
        return self._with_fields({"second": value})

    def set_millisecond(self, value: int) -> "Instant":
        return self._with_fields({"millisecond": value})

    # ========== Arithmetic ==========

    def _add_months(self, months: float) -> "Instant":
        fields = self._fields
        if fields is None:
            raise ValueError("Cannot move an invalid Instant by months")
        whole = math.trunc(months)
        year, month0 = divmod(fields.year * 12 + fields.month - 1 + whole, 12)
        day = min(fields.day, civil.days_in_month(year, month0 + 1))
        wall = encode(
            year,
            month0 + 1,
            day,
            fields.hour,
            fields.minute,
            fields.second,
            fields.millisecond,
        )
        remainder = round((months - whole) * MONTH)
        return self._derive(wall - self.offset * MINUTE + remainder)

    def add(
        self, amount: "int | float | Duration", unit: UnitLike = Unit.MILLISECOND
    ) -> "Instant":
        """Return a copy moved forward by `amount` units.

        Weeks and smaller units are exact. Months and years move the calendar
        month and clamp the day to the target month's length, so Jan 31 plus
        one month is the last day of February. A fractional month remainder
        is added using the average month length (30.44 days).

        `amount` may also be a Duration, in which case `unit` is ignored.
        """
        # Import at runtime to avoid circular dependency
        from caltime.duration import Duration

        if not self.is_valid():
            return self._invalid()
        if isinstance(amount, Duration):
            amount, unit = amount.ms, Unit.MILLISECOND
        normalized = normalize_unit(unit)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return self._invalid()
        if not math.isfinite(amount):
            return self._invalid()

        if normalized is Unit.YEAR:
            return self._add_months(amount * 12)
        if normalized is Unit.MONTH:
            return self._add_months(amount)
        return self._derive(self.epoch_ms + amount * MS_PER_UNIT[normalized])

    def subtract(
        self, amount: "int | float | Duration", unit: UnitLike = Unit.MILLISECOND
    ) -> "Instant":
        """Return a copy moved back by `amount` units. See `add`."""
        from caltime.duration import Duration

        if isinstance(amount, Duration):
            return self.add(-amount)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return self._invalid()
        return self.add(-amount, unit)

    def start_of(self, unit: UnitLike) -> "Instant":
        """First millisecond of the `unit` containing this instant.

        Weeks start on `config.week_starts_on`.
        """
        normalized = normalize_unit(unit)
        f = self._fields
        if f is None:
            return self._invalid()
        if normalized is Unit.YEAR:
            wall = encode(f.year, 1, 1)
        elif normalized is Unit.MONTH:
            wall = encode(f.year, f.month, 1)
        elif normalized is Unit.WEEK:
            days = civil.days_from_civil(f.year, f.month, f.day)
            wall = civil.week_start(days, self.config.week_starts_on) * DAY
        elif normalized is Unit.DAY:
            wall = encode(f.year, f.month, f.day)
        elif normalized is Unit.HOUR:
            wall = encode(f.year, f.month, f.day, f.hour)
        elif normalized is Unit.MINUTE:
            wall = encode(f.year, f.month, f.day, f.hour, f.minute)
        elif normalized is Unit.SECOND:
            wall = encode(f.year, f.month, f.day, f.hour, f.minute, f.second)
        else:
            return self.clone()
        return self._derive(wall - self.offset * MINUTE)

    def end_of(self, unit: UnitLike) -> "Instant":
        """Last millisecond of the `unit` containing this instant."""
        normalized = normalize_unit(unit)
        f = self._fields
        if f is None:
            return self._invalid()
        if normalized is Unit.YEAR:
            wall = encode(f.year + 1, 1, 1)
        elif normalized is Unit.MONTH:
            wall = encode(f.year, f.month + 1, 1)
        elif normalized is Unit.WEEK:
            days = civil.days_from_civil(f.year, f.month, f.day)
            wall = (civil.week_start(days, self.config.week_starts_on) + 7) * DAY
        elif normalized is Unit.DAY:
            wall = encode(f.year, f.month, f.day + 1)
        elif normalized is Unit.HOUR:
            wall = encode(f.year, f.month, f.day, f.hour + 1)
        elif normalized is Unit.MINUTE:
            wall = encode(f.year, f.month, f.day, f.hour, f.minute + 1)
        elif normalized is Unit.SECOND:
            wall = encode(f.year, f.month, f.day, f.hour, f.minute, f.second + 1)
        else:
            return self.clone()
        return self._derive(wall - self.offset * MINUTE - 1)

    # ========== Calendar facts ==========

    def days_in_month(self) -> int | float:
        f = self._fields
        return math.nan if f is None else civil.days_in_month(f.year, f.month)

    def days_in_year(self) -> int | float:
        f = self._fields
        return math.nan if f is None else civil.days_in_year(f.year)

    def weeks_in_year(self) -> int | float:
        f = self._fields
        if f is None:
            return math.nan
        return civil.weeks_in_year(f.year, self.config.first_week_contains_date)

    def week_of_year(self) -> int | float:
        f = self._fields
        if f is None:
            return math.nan
        return civil.week_of_year(
            f.year, f.month, f.day, self.config.first_week_contains_date
        )

    def day_of_year(self) -> int | float:
        f = self._fields
        return math.nan if f is None else civil.day_of_year(f.year, f.month, f.day)

    def quarter(self) -> int | float:
        f = self._fields
        return math.nan if f is None else civil.quarter(f.month)

    # ========== Comparison ==========

    def _pair(
        self, other: TimeInput, unit: UnitLike | None
    ) -> tuple[int, int] | None:
        """Timestamps to compare, or None when either side is invalid."""
        other_time = self._coerce(other)
        if not self.is_valid() or not other_time.is_valid():
            return None
        if unit is None:
            return int(self.epoch_ms), int(other_time.epoch_ms)
        normalized = normalize_unit(unit)
        return (
            int(self.start_of(normalized).epoch_ms),
            int(other_time.start_of(normalized).epoch_ms),
        )

    def is_before(self, other: TimeInput, unit: UnitLike | None = None) -> bool:
        pair = self._pair(other, unit)
        return pair is not None and pair[0] < pair[1]

    def is_after(self, other: TimeInput, unit: UnitLike | None = None) -> bool:
        pair = self._pair(other, unit)
        return pair is not None and pair[0] > pair[1]

    def is_same(self, other: TimeInput, unit: UnitLike | None = None) -> bool:
        """Same instant, or same `unit` (e.g. same day) when given."""
        pair = self._pair(other, unit)
        return pair is not None and pair[0] == pair[1]

    def is_same_or_before(self, other: TimeInput, unit: UnitLike | None = None) -> bool:
        pair = self._pair(other, unit)
        return pair is not None and pair[0] <= pair[1]

    def is_same_or_after(self, other: TimeInput, unit: UnitLike | None = None) -> bool:
        pair = self._pair(other, unit)
        return pair is not None and pair[0] >= pair[1]

    def is_between(
        self,
        start: TimeInput,
        end: TimeInput,
        unit: UnitLike | None = None,
        inclusivity: Inclusivity = "[]",
    ) -> bool:
        """Check whether this instant lies between `start` and `end`.

        `inclusivity` uses interval notation: "[" includes the bound,
        "(" excludes it.

        Raises:
            ValueError: If inclusivity is not one of "()", "[]", "[)", "(]"
        """
        if inclusivity not in ("()", "[]", "[)", "(]"):
            raise ValueError(
                f"Invalid inclusivity {inclusivity!r}.\n"
                f"Hint: use '[]' (both bounds included), '()' (both excluded), "
                f"'[)' or '(]'.\n"
                f"  t.is_between(start, end, 'day', '[)')"
            )
        after_start = (
            self.is_same_or_after(start, unit)
            if inclusivity[0] == "["
            else self.is_after(start, unit)
        )
        before_end = (
            self.is_same_or_before(end, unit)
            if inclusivity[1] == "]"
            else self.is_before(end, unit)
        )
        return after_start and before_end

    def diff(
        self, other: TimeInput, unit: UnitLike | None = None, precise: bool = False
    ) -> int | float:
        """Signed difference `self - other` in `unit` (default milliseconds).

        Months and years use the average lengths (30.44 and 365.25 days).
        The result is truncated toward zero unless `precise` is set.

        Examples:
            >>> a = create_time("2024-01-10T00:00:00Z")
            >>> a.diff("2024-01-01T12:00:00Z", "day")
            8
            >>> a.diff("2024-01-01T12:00:00Z", "day", precise=True)
            8.5
        """
        pair = self._pair(other, None)
        if pair is None:
            return math.nan
        delta = pair[0] - pair[1]
        per_unit = MS_PER_UNIT[normalize_unit(unit or Unit.MILLISECOND)]
        if per_unit == 1:
            return delta
        return delta / per_unit if precise else math.trunc(delta / per_unit)

    # ========== Queries ==========

    def is_today(self) -> bool:
        return self.is_valid() and self.is_same(self._now(), Unit.DAY)

    def is_tomorrow(self) -> bool:
        return self.is_valid() and self.is_same(self._now().add(1, Unit.DAY), Unit.DAY)

    def is_yesterday(self) -> bool:
        return self.is_valid() and self.is_same(
            self._now().subtract(1, Unit.DAY), Unit.DAY
        )

    def is_this_week(self) -> bool:
        if not self.is_valid():
            return False
        now = self._now()
        return self.is_between(now.start_of(Unit.WEEK), now.end_of(Unit.WEEK))

    def is_this_month(self) -> bool:
        return self.is_valid() and self.is_same(self._now(), Unit.MONTH)

    def is_this_year(self) -> bool:
        return self.is_valid() and self.is_same(self._now(), Unit.YEAR)

    def is_weekend(self) -> bool:
        return self.is_valid() and self.weekday in (0, 6)

    def is_weekday(self) -> bool:
        return self.is_valid() and not self.is_weekend()

    def is_leap_year(self) -> bool:
        f = self._fields
        return f is not None and civil.is_leap_year(f.year)

    def _zone_offset(self, epoch_ms: int) -> int:
        if self.zone and self.zone != "UTC":
            return self.config.resolver.offset(self.zone, epoch_ms)
        return local_offset(epoch_ms, self.config)

    def is_dst(self) -> bool:
        """Whether this value's offset is the zone's daylight-saving offset.

        Compares against the offsets of January 1st and July 1st of the same
        year; zones that do not change offset never observe DST. Values
        converted to UTC are never in DST.
        """
        f = self._fields
        if f is None or self.zone == "UTC":
            return False
        january = self._zone_offset(encode(f.year, 1, 1) - self.offset * MINUTE)
        july = self._zone_offset(encode(f.year, 7, 1) - self.offset * MINUTE)
        if january == july:
            return False
        return self.offset == max(january, july)

    # ========== Zones ==========

    def utc(self) -> "Instant":
        """Same instant, read in UTC."""
        if not self.is_valid():
            return self._invalid()
        return Instant(self.epoch_ms, 0, "UTC", self.config)

    def local(self) -> "Instant":
        """Same instant, read in the configured local zone."""
        if not self.is_valid():
            return self._invalid()
        offset = local_offset(int(self.epoch_ms), self.config)
        return Instant(self.epoch_ms, offset, self.config.timezone, self.config)

    def tz(self, zone: str) -> "Instant":
        """Same instant, read in the IANA zone `zone`.

        Raises:
            UnknownTimezoneError: If the resolver does not know `zone`
        """
        resolver = self.config.resolver
        if not self.is_valid():
            resolver.check(zone)
            return self._invalid()
        resolution = resolver.resolve(zone, int(self.epoch_ms))
        f = resolution.fields
        wall = encode(f.year, f.month, f.day, f.hour, f.minute, f.second, f.millisecond)
        return Instant(
            wall - resolution.offset * MINUTE, resolution.offset, zone, self.config
        )

    def utc_offset(
        self, value: int | str | None = None, keep_local_time: bool = True
    ) -> "int | float | Instant":
        """Read the UTC offset in minutes, or return a copy with a new one.

        `value` may be minutes or a "+05:30" / "-0800" / "Z" string. Offsets
        outside -12:00..+14:00 give an invalid Instant. By default the
        calendar fields are kept and the instant moves; with
        `keep_local_time=False` the instant is kept and the fields change.

        Examples:
            >>> t = create_time("2024-01-01T10:00:00Z")
            >>> t.utc_offset("+03:00").format("HH:mm Z")
            '10:00 +03:00'
            >>> t.utc_offset(180, keep_local_time=False).format("HH:mm Z")
            '13:00 +03:00'
        """
        if value is None:
            return self.offset if self.is_valid() else math.nan
        if not self.is_valid():
            return self._invalid()
        if isinstance(value, str):
            minutes = parse_offset(value)
        else:
            minutes = _whole(value)
        if minutes is None or not is_valid_offset(minutes):
            return self._invalid()
        epoch_ms = self.epoch_ms
        if keep_local_time:
            epoch_ms -= (minutes - self.offset) * MINUTE
        return Instant(epoch_ms, minutes, None, self.config)

    # ========== Conversion ==========

    def clone(self) -> "Instant":
        return replace(self)

    def to_timestamp(self) -> int | float:
        return self.epoch_ms

    def to_unix(self) -> int | float:
        """Whole seconds since the epoch, rounded down."""
        if not self.is_valid():
            return math.nan
        return int(self.epoch_ms) // SECOND

    def to_datetime(self) -> datetime | None:
        """Aware datetime carrying this value's offset.

        Returns None for invalid values and for years outside 1-9999.
        """
        f = self._fields
        if f is None or not (1 <= f.year <= 9999):
            return None
        try:
            moment = _EPOCH + timedelta(milliseconds=int(self.epoch_ms))
            return moment.astimezone(tz.tzoffset(self.zone, self.offset * 60))
        except OverflowError:
            return None

    def to_array(self) -> list[int] | None:
        f = self._fields
        if f is None:
            return None
        return [getattr(f, name) for name in _FIELD_NAMES]

    def to_dict(self) -> dict[str, int] | None:
        f = self._fields
        if f is None:
            return None
        return {name: getattr(f, name) for name in _FIELD_NAMES}

    def to_iso_string(self) -> str:
        """UTC ISO-8601 form, e.g. "2021-06-15T11:30:45.000Z"."""
        if not self.is_valid():
            return INVALID_DATE
        f = decode(int(self.epoch_ms))
        if 0 <= f.year <= 9999:
            year = f"{f.year:04d}"
        else:
            year = f"{'+' if f.year > 0 else '-'}{abs(f.year):06d}"
        return (
            f"{year}-{f.month:02d}-{f.day:02d}"
            f"T{f.hour:02d}:{f.minute:02d}:{f.second:02d}.{f.millisecond:03d}Z"
        )

    def to_json(self) -> str:
        return self.to_iso_string()

    def to_string(self) -> str:
        """English long form, e.g. "Tue Jun 15 2021 14:30:45 GMT+0300"."""
        if not self.is_valid():
            return INVALID_DATE
        text = self.format("ddd MMM DD YYYY HH:mm:ss [GMT]ZZ", locale="en")
        if self.zone:
            text += f" ({self.zone})"
        return text

    def to_locale_string(self, locale: str | None = None) -> str:
        """Short date and time in the locale's own layout."""
        return self.format("L LTS", locale=locale)

    # ========== Formatting ==========

    def _tokens(self, locale: str) -> dict[str, Callable[[], TokenValue]]:
        f = self._fields
        if f is None:
            raise ValueError("Cannot build format tokens for an invalid Instant")
        names = self.config.locales

        def twelve_hour() -> int:
            return f.hour % 12 or 12

        return {
            "YYYY": lambda: f.year,
            "YY": lambda: pad(abs(f.year) % 100),
            "MMMM": lambda: names.month_name(locale, f.month - 1),
            "MMM": lambda: names.month_name_short(locale, f.month - 1),
            "MM": lambda: pad(f.month),
            "M": lambda: f.month,
            "DD": lambda: pad(f.day),
            "D": lambda: f.day,
            "Do": lambda: names.ordinal(locale, f.day),
            "dddd": lambda: names.weekday_name(locale, f.weekday),
            "ddd": lambda: names.weekday_name_short(locale, f.weekday),
            "dd": lambda: names.weekday_name_min(locale, f.weekday),
            "d": lambda: f.weekday,
            "E": lambda: f.weekday or 7,
            "HH": lambda: pad(f.hour),
            "H": lambda: f.hour,
            "hh": lambda: pad(twelve_hour()),
            "h": twelve_hour,
            "mm": lambda: pad(f.minute),
            "m": lambda: f.minute,
            "ss": lambda: pad(f.second),
            "s": lambda: f.second,
            "SSS": lambda: pad(f.millisecond, 3),
            "SS": lambda: pad(f.millisecond // 10),
            "S": lambda: f.millisecond // 100,
            "A": lambda: "AM" if f.hour < 12 else "PM",
            "a": lambda: "am" if f.hour < 12 else "pm",
            "Z": lambda: format_offset(self.offset),
            "ZZ": lambda: format_offset(self.offset, colon=False),
            "z": lambda: self.timezone_name,
            "zzz": lambda: self.timezone_name,
            "X": self.to_unix,
            "x": self.to_timestamp,
            "Q": lambda: civil.quarter(f.month),
            "Qo": lambda: names.ordinal(locale, civil.quarter(f.month)),
            "W": self.week_of_year,
            "WW": lambda: pad(int(self.week_of_year())),
            "Wo": lambda: names.ordinal(locale, int(self.week_of_year())),
            "DDD": lambda: civil.day_of_year(f.year, f.month, f.day),
            "DDDD": lambda: pad(civil.day_of_year(f.year, f.month, f.day), 3),
        }

    def format(self, template: str | None = None, locale: str | None = None) -> str:
        """Render the value with a token template.

        Defaults to the config's "datetime" format. Text in [brackets] is
        copied as-is, and letter runs that are not tokens are kept verbatim.

        Examples:
            >>> t = create_time("2021-06-15T14:30:45Z").utc()
            >>> t.format("dddd, MMMM Do YYYY [at] h:mm A")
            'Tuesday, June 15th 2021 at 2:30 PM'
            >>> t.format("LL")
            'June 15, 2021'
        """
        if not self.is_valid():
            return INVALID_DATE
        locale = locale or self.config.default_locale()
        template = template or self.config.default_format("datetime")
        names = self.config.locales
        long_formats = {
            key: found
            for key in LONG_FORMATS
            if (found := names.long_format(locale, key)) is not None
        }
        return render(expand(template, long_formats), self._tokens(locale))

    # ========== Relative time ==========

    def from_time(self, other: TimeInput, without_suffix: bool = False) -> str:
        """This instant relative to `other` ("in 2 days", "3 hours ago")."""
        pair = self._pair(other, None)
        if pair is None:
            return INVALID_DATE
        delta = pair[0] - pair[1]
        return format_relative(abs(delta), delta < 0, without_suffix, self.config)

    def to_time(self, other: TimeInput, without_suffix: bool = False) -> str:
        """`other` relative to this instant."""
        pair = self._pair(other, None)
        if pair is None:
            return INVALID_DATE
        delta = pair[1] - pair[0]
        return format_relative(abs(delta), delta < 0, without_suffix, self.config)

    def from_now(self, without_suffix: bool = False) -> str:
        return self.from_time(self._now(), without_suffix)

    def to_now(self, without_suffix: bool = False) -> str:
        return self.to_time(self._now(), without_suffix)


# ========== Factory ==========


def _parse_string(text: str, config: Config) -> Instant:
    text = text.strip()

    match = _ISO_PATTERN.match(text)
    if match:
        groups = match.groups()
        year, month, day = (int(g) for g in groups[:3])
        hour, minute, second = (int(g or 0) for g in groups[3:6])
        millisecond = int((groups[6] or "0").ljust(3, "0"))
        if not _in_range(year, month, day, hour, minute, second):
            logger.debug("Field out of range in %r", text)
            return Instant(math.nan, config=config)
        wall = encode(year, month, day, hour, minute, second, millisecond)
        designator, sign, offset_hours, offset_minutes = groups[7:]
        if designator is None:
            return _from_wall_clock(wall, config)
        offset = 0
        if sign is not None:
            if int(offset_minutes) > 59:
                logger.debug("Offset out of range in %r", text)
                return Instant(math.nan, config=config)
            offset = int(offset_hours) * 60 + int(offset_minutes)
            offset = -offset if sign == "-" else offset
        return Instant(wall - offset * MINUTE, offset, None, config)

    match = _NUMERIC_DATE_PATTERN.match(text)
    if match:
        first, second_group, year = (int(g) for g in match.groups())
        # Day first only when the first group cannot be a month
        if first > 12:
            day, month = first, second_group
        else:
            month, day = first, second_group
        if _in_range(year, month, day):
            return _from_wall_clock(encode(year, month, day), config)
        logger.debug("Field out of range in %r", text)
        return Instant(math.nan, config=config)

    match = _MONTH_NAME_PATTERN.match(text)
    if match:
        name, day_text, year_text = match.groups()
        month = _MONTH_NUMBERS.get(name.lower())
        year, day = int(year_text), int(day_text)
        if month is not None and _in_range(year, month, day):
            return _from_wall_clock(encode(year, month, day), config)

    logger.debug("Could not parse %r as a date", text)
    return Instant(math.nan, config=config)


def _from_components(values: Sequence[Any], config: Config) -> Instant:
    parts = [_whole(value) for value in values]
    if any(part is None for part in parts):
        return Instant(math.nan, config=config)
    return _from_wall_clock(encode(*parts), config)


def create_time(value: TimeInput = None, config: Config | None = None) -> Instant:
    """Create an Instant from any supported input.

    Accepts:
    - None: the current time (from config.clock)
    - Instant: a copy (rebound to `config` when one is given)
    - int/float: milliseconds since the epoch
    - datetime: aware values keep their offset; naive ones are local time
    - date: local midnight of that day
    - str: ISO-8601, "D/M/YYYY" or "M/D/YYYY", or "Month D, YYYY"
    - Mapping: {"year", "month", "day", "hour", ...}; missing date parts
      default to today, missing time parts to 0
    - Sequence: [year, month, day?, hour?, minute?, second?, millisecond?]

    Anything else, and any input that cannot be read, gives an invalid
    Instant rather than an exception.

    Examples:
        >>> create_time(1609459200000).utc().format("YYYY-MM-DD")
        '2021-01-01'
        >>> create_time("not a date").is_valid()
        False
    """
    if isinstance(value, Instant):
        return value.clone() if config is None else replace(value, config=config)

    config = config or DEFAULT_CONFIG

    if value is None:
        epoch_ms = config.clock()
        return Instant(epoch_ms, local_offset(epoch_ms, config), config.timezone, config)
    if isinstance(value, bool):
        return Instant(math.nan, config=config)
    if isinstance(value, (int, float)):
        epoch_ms = _whole(value)
        if epoch_ms is None or abs(epoch_ms) > MAX_EPOCH_MS:
            return Instant(math.nan, config=config)
        return Instant(epoch_ms, local_offset(epoch_ms, config), config.timezone, config)
    if isinstance(value, datetime):
        offset = value.utcoffset()
        if offset is None:
            return _from_components(
                (
                    value.year,
                    value.month,
                    value.day,
                    value.hour,
                    value.minute,
                    value.second,
                    value.microsecond // 1000,
                ),
                config,
            )
        epoch_ms = (value - _EPOCH) // timedelta(milliseconds=1)
        zone = getattr(value.tzinfo, "key", None)
        return Instant(epoch_ms, round(offset.total_seconds() / 60), zone, config)
    if isinstance(value, date):
        return _from_components((value.year, value.month, value.day), config)
    if isinstance(value, str):
        return _parse_string(value, config)
    if isinstance(value, Mapping):
        today = create_time(None, config)
        components = (
            value.get("year", today.year),
            value.get("month", today.month),
            value.get("day", value.get("date", today.day)),
            value.get("hour", 0),
            value.get("minute", 0),
            value.get("second", 0),
            value.get("millisecond", 0),
        )
        return _from_components(components, config)
    # bytes are sequences of ints but never civil components
    if isinstance(value, (bytes, bytearray)):
        return Instant(math.nan, config=config)
    if isinstance(value, Sequence) and 2 <= len(value) <= 7:
        return _from_components(value, config)
    return Instant(math.nan, config=config)


def now(config: Config | None = None) -> Instant:
    return create_time(None, config)


def today(config: Config | None = None) -> Instant:
    """Local midnight of the current day."""
    return create_time(None, config).start_of(Unit.DAY)


def unix(seconds: int | float, config: Config | None = None) -> Instant:
    """Create an Instant from seconds since the epoch."""
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return create_time(math.nan, config)
    return create_time(seconds * SECOND, config)


def is_valid(value: TimeInput, config: Config | None = None) -> bool:
    """Check whether `value` can be read as a valid Instant."""
    return create_time(value, config).is_valid()


def parse(text: str, fmt: str | None = None, config: Config | None = None) -> Instant:
    """Parse `text` with the same patterns as create_time.

    `fmt` is accepted for call-site readability; parsing always tries ISO-8601,
    numeric day/month dates and English month names, in that order.
    """
    if not isinstance(text, str):
        return create_time(math.nan, config)
    return _parse_string(text, config or DEFAULT_CONFIG)
