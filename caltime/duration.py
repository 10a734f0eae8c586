"""The Duration value: a signed span of milliseconds.

Components (years, months, days, ...) are not stored. They are cut from the
total on demand with the average unit lengths, largest unit first, so that
the components always add back up to the total:

    >>> d = create_duration("P1Y2M3DT4H5M6S")
    >>> d.years, d.months, d.days, d.hours, d.minutes, d.seconds
    (1, 2, 3, 4, 5, 6)
    >>> d.to_iso_string()
    'P1Y2M3DT4H5M6S'
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from decimal import Decimal
from typing import Any, Literal, TypeAlias

from caltime.config import DEFAULT_CONFIG, Config
from caltime.formatter import TokenTable, pad, render
from caltime.relative import format_relative
from caltime.util import (
    DAY,
    HOUR,
    MINUTE,
    MONTH,
    MS_PER_UNIT,
    SECOND,
    YEAR,
    Unit,
    UnitLike,
    normalize_unit,
)

logger = logging.getLogger(__name__)

INVALID_DURATION = "Invalid Duration"

DurationInput: TypeAlias = (
    "Duration | int | float | str | timedelta | Mapping[str, int | float] "
    "| tuple[int | float, UnitLike]"
)
DurationStyle: TypeAlias = Literal["long", "short", "narrow", "digital"]

_ISO_PATTERN = re.compile(
    r"^([-+])?P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
_ISO_UNITS = (Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY, Unit.HOUR, Unit.MINUTE)

_DIGITAL_TEMPLATES = ("HH:mm:ss", "HH:mm:ss.SSS")

_ABBREVIATIONS = {
    Unit.YEAR: "y",
    Unit.MONTH: "mo",
    Unit.WEEK: "w",
    Unit.DAY: "d",
    Unit.HOUR: "h",
    Unit.MINUTE: "m",
    Unit.SECOND: "s",
    Unit.MILLISECOND: "ms",
}

_DEFAULT_UNITS = (Unit.DAY, Unit.HOUR, Unit.MINUTE, Unit.SECOND)


def _number(value: Any) -> int | float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _from_iso(text: str) -> int | float:
    match = _ISO_PATTERN.match(text.strip())
    if match is None:
        logger.debug("Could not parse %r as an ISO-8601 duration", text)
        return math.nan
    sign, *counts, seconds = match.groups()
    total: int | float = 0
    for count, unit in zip(counts, _ISO_UNITS):
        if count:
            total += int(count) * MS_PER_UNIT[unit]
    if seconds:
        exact = Decimal(seconds) * SECOND
        total += int(exact) if exact == exact.to_integral_value() else float(exact)
    return -total if sign == "-" else total


def _from_timedelta(delta: timedelta) -> int | float:
    whole = (delta.days * 86400 + delta.seconds) * SECOND
    if delta.microseconds % 1000:
        return whole + delta.microseconds / 1000
    return whole + delta.microseconds // 1000


def _from_mapping(values: Mapping[str, Any]) -> int | float:
    total: int | float = 0
    for key, amount in values.items():
        number = _number(amount)
        if number is None:
            return math.nan
        total += number * MS_PER_UNIT[normalize_unit(key)]
    return total


def to_milliseconds(value: DurationInput, unit: UnitLike | None = None) -> int | float:
    """Total milliseconds of any duration-like value, NaN when unreadable.

    Raises:
        ValueError: If `unit` or a mapping key is not a known unit name
    """
    if isinstance(value, Duration):
        return value.ms
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        if unit is None:
            return value
        return value * MS_PER_UNIT[normalize_unit(unit)]
    if isinstance(value, timedelta):
        return _from_timedelta(value)
    if isinstance(value, str):
        return _from_iso(value)
    if isinstance(value, Mapping):
        return _from_mapping(value)
    if isinstance(value, tuple) and len(value) == 2:
        amount, amount_unit = value
        number = _number(amount)
        if number is None:
            return math.nan
        return number * MS_PER_UNIT[normalize_unit(amount_unit)]
    return math.nan


@dataclass(frozen=True, eq=False)
class Duration:
    """An immutable, signed span of time.

    Build values with `create_duration`. Equality and ordering compare the
    total length only.
    """

    ms: int | float
    config: Config = field(default=DEFAULT_CONFIG, repr=False, compare=False)

    def is_valid(self) -> bool:
        return isinstance(self.ms, (int, float)) and math.isfinite(self.ms)

    def _comparable(self, other: object) -> bool:
        return self.is_valid() and isinstance(other, Duration) and other.is_valid()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.ms == other.ms

    def __hash__(self) -> int:
        return hash(self.ms)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.ms < other.ms

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.ms <= other.ms

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.ms > other.ms

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.ms >= other.ms

    def _with_ms(self, ms: int | float) -> "Duration":
        return replace(self, ms=ms)

    def _components(self) -> dict[str, int] | None:
        if not self.is_valid():
            return None
        rest = abs(self.ms)
        years, rest = divmod(rest, YEAR)
        months, rest = divmod(rest, MONTH)
        days, rest = divmod(rest, DAY)
        hours, rest = divmod(rest, HOUR)
        minutes, rest = divmod(rest, MINUTE)
        seconds, rest = divmod(rest, SECOND)
        sign = -1 if self.ms < 0 else 1
        values = {
            "years": int(years),
            "months": int(months),
            "weeks": int(days) // 7,
            "days": int(days),
            "hours": int(hours),
            "minutes": int(minutes),
            "seconds": int(seconds),
            "milliseconds": int(rest),
        }
        return {name: sign * value for name, value in values.items()}

    def _component(self, name: str) -> int | float:
        components = self._components()
        return math.nan if components is None else components[name]

    # ========== Components ==========

    @property
    def years(self) -> int | float:
        return self._component("years")

    @property
    def months(self) -> int | float:
        """Whole months left after the years are taken out."""
        return self._component("months")

    @property
    def weeks(self) -> int | float:
        """Whole weeks in the days component."""
        return self._component("weeks")

    @property
    def days(self) -> int | float:
        return self._component("days")

    @property
    def hours(self) -> int | float:
        """Hours component, 0-23."""
        return self._component("hours")

    @property
    def minutes(self) -> int | float:
        return self._component("minutes")

    @property
    def seconds(self) -> int | float:
        return self._component("seconds")

    @property
    def milliseconds(self) -> int | float:
        """Milliseconds component, 0-999."""
        return self._component("milliseconds")

    # ========== Totals ==========

    def _total(self, unit: Unit) -> float:
        if not self.is_valid():
            return math.nan
        return self.ms / MS_PER_UNIT[unit]

    def as_years(self) -> float:
        return self._total(Unit.YEAR)

    def as_months(self) -> float:
        return self._total(Unit.MONTH)

    def as_weeks(self) -> float:
        return self._total(Unit.WEEK)

    def as_days(self) -> float:
        return self._total(Unit.DAY)

    def as_hours(self) -> float:
        return self._total(Unit.HOUR)

    def as_minutes(self) -> float:
        return self._total(Unit.MINUTE)

    def as_seconds(self) -> float:
        return self._total(Unit.SECOND)

    def as_milliseconds(self) -> int | float:
        return self.ms if self.is_valid() else math.nan

    def as_unit(self, unit: UnitLike) -> float:
        return self._total(normalize_unit(unit))

    # ========== Arithmetic ==========

    def add(
        self, amount: DurationInput, unit: UnitLike | None = None
    ) -> "Duration":
        """Return a longer duration.

        Examples:
            >>> create_duration({"hours": 1}).add(30, "minutes").as_minutes()
            90.0
            >>> create_duration("PT1H").add("PT15M").format("HH:mm:ss")
            '01:15:00'
        """
        return self._with_ms(self.ms + to_milliseconds(amount, unit))

    def subtract(
        self, amount: DurationInput, unit: UnitLike | None = None
    ) -> "Duration":
        return self._with_ms(self.ms - to_milliseconds(amount, unit))

    def __add__(self, other: object) -> "Duration":
        if not isinstance(other, (Duration, timedelta)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> "Duration":
        if not isinstance(other, (Duration, timedelta)):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Duration":
        return self._with_ms(-self.ms)

    def __abs__(self) -> "Duration":
        return self._with_ms(abs(self.ms))

    # ========== Serialization ==========

    def to_iso_string(self) -> str:
        """ISO-8601 form with only the non-zero parts, "PT0S" when empty.

        Negative durations are written as "-" followed by the form of their
        absolute value. Fractions of a millisecond are dropped.
        """
        components = self._components()
        if components is None:
            return INVALID_DURATION
        if self.ms < 0:
            return "-" + abs(self).to_iso_string()

        date_part = "".join(
            f"{components[name]}{designator}"
            for name, designator in (("years", "Y"), ("months", "M"), ("days", "D"))
            if components[name]
        )
        time_part = "".join(
            f"{components[name]}{designator}"
            for name, designator in (("hours", "H"), ("minutes", "M"))
            if components[name]
        )
        seconds, millis = components["seconds"], components["milliseconds"]
        if millis:
            time_part += f"{seconds}.{millis:03d}".rstrip("0") + "S"
        elif seconds:
            time_part += f"{seconds}S"

        if not date_part and not time_part:
            return "PT0S"
        return "P" + date_part + ("T" + time_part if time_part else "")

    def to_json(self) -> str:
        return self.to_iso_string()

    def to_dict(self) -> dict[str, int] | None:
        return self._components()

    def to_timedelta(self) -> timedelta | None:
        if not self.is_valid():
            return None
        return timedelta(milliseconds=self.ms)

    def clone(self) -> "Duration":
        return replace(self)

    def __str__(self) -> str:
        return self.to_iso_string()

    # ========== Formatting ==========

    def _digital(self, with_millis: bool) -> str:
        rest = abs(self.ms)
        hours = int(rest // HOUR)
        components = self._components()
        if components is None:
            raise ValueError("Cannot format an invalid Duration")
        text = (
            f"{pad(hours)}:{pad(abs(components['minutes']))}"
            f":{pad(abs(components['seconds']))}"
        )
        if with_millis:
            text += f".{pad(abs(components['milliseconds']), 3)}"
        return ("-" if self.ms < 0 else "") + text

    def format(self, template: str = "HH:mm:ss") -> str:
        """Render the duration with a token template.

        "HH:mm:ss" and "HH:mm:ss.SSS" read like a stopwatch: the hours are
        the total hours, not wrapped at 24. Other templates use the
        component tokens YYYY YY M MM d dd w ww H HH h hh m mm s ss SSS S,
        where H is the total (fractional) hours and HH its whole part.

        Examples:
            >>> create_duration({"hours": 26, "minutes": 3}).format()
            '26:03:00'
            >>> create_duration({"hours": 26, "minutes": 3}).format("d[d] h[h]")
            '1d 2h'
        """
        components = self._components()
        if components is None:
            return INVALID_DURATION
        if template in _DIGITAL_TEMPLATES:
            return self._digital(template.endswith(".SSS"))

        c = components
        total_hours = self.as_hours()
        tokens: TokenTable = {
            "YYYY": lambda: c["years"],
            "YY": lambda: str(c["years"])[-2:],
            "M": lambda: c["months"],
            "MM": lambda: pad(c["months"]),
            "d": lambda: c["days"],
            "dd": lambda: pad(c["days"]),
            "w": lambda: c["weeks"],
            "ww": lambda: pad(c["weeks"]),
            "H": lambda: total_hours,
            "HH": lambda: pad(math.floor(total_hours)),
            "h": lambda: c["hours"],
            "hh": lambda: pad(c["hours"]),
            "m": lambda: c["minutes"],
            "mm": lambda: pad(c["minutes"]),
            "s": lambda: c["seconds"],
            "ss": lambda: pad(c["seconds"]),
            "SSS": lambda: pad(c["milliseconds"], 3),
            "S": lambda: c["milliseconds"] // 100,
        }
        return render(template, tokens)

    def humanize(self, with_suffix: bool = False) -> str:
        """Describe the length in words ("5 minutes", "in a day").

        With `with_suffix`, negative durations read as past ("2 hours ago").

        Examples:
            >>> create_duration({"minutes": 5}).humanize()
            '5 minutes'
            >>> create_duration({"minutes": -5}).humanize(with_suffix=True)
            '5 minutes ago'
        """
        if not self.is_valid():
            return INVALID_DURATION
        return format_relative(
            abs(self.ms), self.ms < 0, not with_suffix, self.config
        )


def create_duration(
    value: DurationInput = 0,
    unit: UnitLike | None = None,
    config: Config | None = None,
) -> Duration:
    """Create a Duration from any supported input.

    Accepts:
    - int/float: milliseconds, or `unit`s when `unit` is given
    - str: ISO-8601 duration such as "P1Y2M3DT4H5M6.5S" or "-PT90M"
    - Mapping: {"hours": 1, "minutes": 30}; keys are unit names or aliases
    - tuple: (amount, unit)
    - timedelta
    - Duration: a copy

    Unreadable input gives an invalid Duration rather than an exception.

    Raises:
        ValueError: If a unit name is not part of the unit vocabulary

    Examples:
        >>> create_duration(90, "minutes").as_hours()
        1.5
        >>> create_duration("not a duration").is_valid()
        False
    """
    if isinstance(value, Duration) and config is None:
        config = value.config
    return Duration(to_milliseconds(value, unit), config or DEFAULT_CONFIG)


def format_duration(
    ms: int | float,
    style: DurationStyle = "long",
    units: "list[UnitLike] | None" = None,
    largest: int | None = None,
    template: str | None = None,
    config: Config | None = None,
) -> str:
    """Spell out a length in milliseconds.

    Args:
        ms: Length in milliseconds
        style: "long" ("1 day, 2 hours"), "short" ("1d 2h"), "narrow"
            ("1d2h") or "digital" ("26:00:00")
        units: Units to break the length into (default: days, hours,
            minutes, seconds)
        largest: Keep at most this many non-zero components
        template: Render with Duration.format instead

    Examples:
        >>> format_duration(93_784_000)
        '1 day, 2 hours, 3 minutes, 4 seconds'
        >>> format_duration(93_784_000, style="short", largest=2)
        '1d 2h'
    """
    duration = create_duration(ms, config=config)
    if template is not None:
        return duration.format(template)
    if style == "digital":
        return duration.format("HH:mm:ss")
    if not duration.is_valid():
        return INVALID_DURATION

    # Only the requested units take part, so larger ones left out fold down
    selected = sorted(
        {normalize_unit(unit) for unit in (units or _DEFAULT_UNITS)},
        key=MS_PER_UNIT.__getitem__,
        reverse=True,
    )
    limit = len(selected) if largest is None else largest

    parts = []
    rest = abs(duration.ms)
    for unit in selected:
        if len(parts) >= limit:
            break
        value, rest = divmod(rest, MS_PER_UNIT[unit])
        value = int(value)
        if value <= 0:
            continue
        if style == "long":
            name = unit.value if value == 1 else f"{unit.value}s"
            parts.append(f"{value} {name}")
        else:
            parts.append(f"{value}{_ABBREVIATIONS[unit]}")

    if not parts:
        text = "0 milliseconds" if style == "long" else "0ms"
    else:
        separator = {"long": ", ", "short": " "}.get(style, "")
        text = separator.join(parts)
    return ("-" if duration.ms < 0 else "") + text


def humanize_duration(ms: int | float, config: Config | None = None) -> str:
    """Shorthand for create_duration(ms).humanize()."""
    return create_duration(ms, config=config).humanize()
