"""Relative-time phrases ("in 5 minutes", "2 days ago").

Both Instant.from_time/to_time and Duration.humanize end up in
`format_relative`, so the same delta reads the same way everywhere.
"""

import math
from typing import TYPE_CHECKING

from caltime.locales import Label
from caltime.util import DAY, HOUR, MINUTE, MS_PER_UNIT, SECOND, WEEK, Unit

if TYPE_CHECKING:
    from caltime.config import Config, Thresholds

LABEL_KEY: dict[Unit, str] = {
    Unit.SECOND: "s",
    Unit.MINUTE: "m",
    Unit.HOUR: "h",
    Unit.DAY: "d",
    Unit.WEEK: "w",
    Unit.MONTH: "M",
    Unit.YEAR: "y",
}


def classify(abs_ms: float, thresholds: "Thresholds") -> Unit:
    """Pick the unit a delta of `abs_ms` milliseconds is expressed in.

    Examples:
        >>> from caltime.config import Thresholds
        >>> classify(30 * SECOND, Thresholds())
        <Unit.SECOND: 'second'>
        >>> classify(3 * HOUR, Thresholds())
        <Unit.HOUR: 'hour'>
    """
    if abs_ms < thresholds.second * SECOND:
        return Unit.SECOND
    if abs_ms < thresholds.minute * MINUTE:
        return Unit.MINUTE
    if abs_ms < thresholds.hour * HOUR:
        return Unit.HOUR
    if abs_ms < thresholds.day * DAY:
        return Unit.DAY
    if abs_ms < WEEK:
        return Unit.WEEK
    # Month cutoffs count 30.44-day months
    if abs_ms < thresholds.month * 30.44 * DAY:
        return Unit.MONTH
    return Unit.YEAR


def count_in_unit(abs_ms: float, unit: Unit) -> int:
    """Round `abs_ms` to a whole number of `unit`, halves rounding up."""
    return math.floor(abs_ms / MS_PER_UNIT[unit] + 0.5)


def _apply(label: Label, count: int, without_suffix: bool, key: str, is_future: bool) -> str:
    if callable(label):
        return label(count, without_suffix, key, is_future)
    return label.replace("%d", str(count), 1)


def format_relative(
    abs_ms: float,
    is_past: bool,
    without_suffix: bool = False,
    config: "Config | None" = None,
) -> str:
    """Render a delta as a localized phrase.

    Args:
        abs_ms: Size of the delta in milliseconds (sign is ignored)
        is_past: Choose the "past" wrapper instead of "future"
        without_suffix: Return only the amount ("5 minutes")
        config: Supplies thresholds, locale and label overrides

    Examples:
        >>> format_relative(5 * MINUTE, is_past=True)
        '5 minutes ago'
        >>> format_relative(DAY, is_past=False)
        'in a day'
        >>> format_relative(DAY, is_past=False, without_suffix=True)
        'a day'
    """
    # Import at runtime to avoid circular dependency
    from caltime.config import DEFAULT_CONFIG

    config = config or DEFAULT_CONFIG
    abs_ms = abs(abs_ms)
    labels = config.relative_time_labels_for()

    unit = classify(abs_ms, config.relative_time_thresholds())
    count = count_in_unit(abs_ms, unit)
    key = LABEL_KEY[unit]
    if count != 1:
        key = key * 2

    phrase = _apply(labels[key], count, without_suffix, key, not is_past)
    if without_suffix:
        return phrase

    wrapper = labels["past" if is_past else "future"]
    if callable(wrapper):
        wrapper = wrapper(count, without_suffix, key, not is_past)
    return wrapper.replace("%s", phrase, 1)
