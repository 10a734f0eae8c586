"""Configuration value for caltime.

A Config is an immutable value. Instants keep a reference to the Config they
were created under and every entry point accepts an explicit `config`, so
there is no process-wide mutable state to reset between tests.
"""

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Literal, TypeAlias

from caltime.locales import Label, LocaleRegistry
from caltime.zones import ZoneInfoResolver, ZoneResolver

FormatKind: TypeAlias = Literal["date", "time", "datetime"]

DEFAULT_FORMATS: Mapping[str, str] = MappingProxyType({
    "date": "YYYY-MM-DD",
    "time": "HH:mm:ss",
    "datetime": "YYYY-MM-DD HH:mm:ss",
})


def system_clock() -> int:
    """Milliseconds since the Unix epoch, read from the host clock."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Thresholds:
    """Relative-time cutoffs, each counted in its own unit.

    A delta below `second` seconds reads as seconds, below `minute` minutes
    as minutes, and so on. The week cutoff is always 7 days.
    """

    second: int = 45
    minute: int = 45
    hour: int = 22
    day: int = 26
    month: int = 11

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(
                    f"Threshold {item.name!r} must be a positive number, "
                    f"got {value!r}"
                )


@dataclass(frozen=True, kw_only=True)
class Config:
    """Defaults consulted by Instant, Duration and the calendar helpers.

    Attributes:
        locale: Locale name used for names, ordinals and relative labels
        timezone: IANA zone used as "local"; None means the host zone
        week_starts_on: First day of the week, 0 (Sunday) - 6 (Saturday)
        first_week_contains_date: January day that week 1 must contain (1-7)
        formats: Default templates for "date", "time" and "datetime"
        thresholds: Relative-time cutoffs
        relative_time_labels: Per-key overrides of the locale's labels
        locales: Locale registry used for every name lookup
        resolver: Zone resolver consulted for named zones
        clock: Zero-argument callable returning "now" in epoch milliseconds
    """

    locale: str = "en"
    timezone: str | None = None
    week_starts_on: int = 1
    first_week_contains_date: int = 4
    formats: Mapping[str, str] = field(default_factory=lambda: DEFAULT_FORMATS)
    thresholds: Thresholds = field(default_factory=Thresholds)
    relative_time_labels: Mapping[str, Label] | None = None
    locales: LocaleRegistry = field(default_factory=LocaleRegistry, compare=False)
    resolver: ZoneResolver = field(default_factory=ZoneInfoResolver, compare=False)
    clock: Callable[[], int] = field(default=system_clock, compare=False)

    def __post_init__(self) -> None:
        if not (0 <= self.week_starts_on <= 6):
            raise ValueError(
                f"week_starts_on must be 0-6, got {self.week_starts_on!r}.\n"
                f"Hint: 0 is Sunday and 1 is Monday.\n"
                f"  configure(week_starts_on=0)  # weeks start on Sunday"
            )
        if not (1 <= self.first_week_contains_date <= 7):
            raise ValueError(
                f"first_week_contains_date must be 1-7, "
                f"got {self.first_week_contains_date!r}.\n"
                f"Hint: 4 gives ISO-8601 week numbers, 1 makes week 1 the "
                f"week of January 1st."
            )
        unknown = set(self.formats) - set(DEFAULT_FORMATS)
        if unknown:
            raise ValueError(
                f"Unknown format kind(s): {', '.join(sorted(unknown))}.\n"
                f"Valid kinds: {', '.join(DEFAULT_FORMATS)}"
            )

    def default_locale(self) -> str:
        return self.locale or "en"

    def default_week_start(self) -> int:
        return self.week_starts_on

    def default_format(self, kind: FormatKind = "datetime") -> str:
        """Default template for `kind`.

        Raises:
            ValueError: If kind is not "date", "time" or "datetime"
        """
        if kind not in DEFAULT_FORMATS:
            raise ValueError(
                f"Unknown format kind {kind!r}.\n"
                f"Valid kinds: {', '.join(DEFAULT_FORMATS)}"
            )
        return self.formats.get(kind, DEFAULT_FORMATS[kind])

    def relative_time_thresholds(self) -> Thresholds:
        return self.thresholds

    def relative_time_labels_for(self, locale: str | None = None) -> dict[str, Label]:
        """Locale labels with this config's overrides applied key by key."""
        labels = dict(self.locales.relative_labels(locale or self.default_locale()))
        if self.relative_time_labels:
            labels.update(self.relative_time_labels)
        return labels


DEFAULT_CONFIG = Config()


def configure(base: Config | None = None, **changes: Any) -> Config:
    """Return a new Config with `changes` applied on top of `base`.

    `formats` and `thresholds` may be partial mappings; they are merged into
    the base values instead of replacing them.

    Examples:
        >>> config = configure(locale="tr", week_starts_on=0)
        >>> config = configure(config, thresholds={"second": 30})
        >>> config.thresholds.minute  # untouched fields are kept
        45
    """
    base = base or DEFAULT_CONFIG
    for key in ("formats", "thresholds"):
        if key in changes and changes[key] is None:
            del changes[key]
    if "formats" in changes:
        changes["formats"] = MappingProxyType(
            {**base.formats, **changes["formats"]}
        )
    thresholds = changes.get("thresholds")
    if isinstance(thresholds, Mapping):
        unknown = set(thresholds) - {item.name for item in fields(Thresholds)}
        if unknown:
            raise ValueError(
                f"Unknown threshold(s): {', '.join(sorted(unknown))}.\n"
                f"Valid thresholds: second, minute, hour, day, month"
            )
        changes["thresholds"] = replace(base.thresholds, **thresholds)
    return replace(base, **changes)
