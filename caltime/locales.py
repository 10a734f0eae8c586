"""Locale tables and the registry that serves name lookups.

A Locale is plain data: month and weekday names, relative-time labels, an
ordinal rule and long-date format templates. The registry is an ordinary
object owned by whoever builds the Config; nothing here is process-wide.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias

RelativeTimeFn: TypeAlias = Callable[[int, bool, str, bool], str]
"""Label callable: (count, without_suffix, key, is_future) -> text."""

Label: TypeAlias = str | RelativeTimeFn

LABEL_KEYS = (
    "future", "past",
    "s", "ss", "m", "mm", "h", "hh", "d", "dd", "w", "ww", "M", "MM", "y", "yy",
)


def _english_ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _dotted_ordinal(n: int) -> str:
    return f"{n}."


@dataclass(frozen=True, kw_only=True)
class Locale:
    name: str
    months: tuple[str, ...]
    months_short: tuple[str, ...]
    weekdays: tuple[str, ...]
    weekdays_short: tuple[str, ...]
    weekdays_min: tuple[str, ...]
    relative_time: Mapping[str, Label]
    ordinal: Callable[[int], str]
    formats: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.months) != 12 or len(self.months_short) != 12:
            raise ValueError(
                f"Locale {self.name!r} must define 12 month names, "
                f"got {len(self.months)} full and {len(self.months_short)} short"
            )
        for attr in ("weekdays", "weekdays_short", "weekdays_min"):
            if len(getattr(self, attr)) != 7:
                raise ValueError(
                    f"Locale {self.name!r} must define 7 entries in {attr}"
                )
        missing = [key for key in LABEL_KEYS if key not in self.relative_time]
        if missing:
            raise ValueError(
                f"Locale {self.name!r} is missing relative-time labels: "
                f"{', '.join(missing)}"
            )


EN = Locale(
    name="en",
    months=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    months_short=(
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ),
    weekdays=(
        "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
    ),
    weekdays_short=("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    weekdays_min=("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"),
    relative_time=MappingProxyType({
        "future": "in %s",
        "past": "%s ago",
        "s": "a few seconds",
        "ss": "%d seconds",
        "m": "a minute",
        "mm": "%d minutes",
        "h": "an hour",
        "hh": "%d hours",
        "d": "a day",
        "dd": "%d days",
        "w": "a week",
        "ww": "%d weeks",
        "M": "a month",
        "MM": "%d months",
        "y": "a year",
        "yy": "%d years",
    }),
    ordinal=_english_ordinal,
    formats=MappingProxyType({
        "LT": "h:mm A",
        "LTS": "h:mm:ss A",
        "L": "MM/DD/YYYY",
        "LL": "MMMM D, YYYY",
        "LLL": "MMMM D, YYYY h:mm A",
        "LLLL": "dddd, MMMM D, YYYY h:mm A",
    }),
)

TR = Locale(
    name="tr",
    months=(
        "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
        "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
    ),
    months_short=(
        "Oca", "Şub", "Mar", "Nis", "May", "Haz",
        "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara",
    ),
    weekdays=(
        "Pazar", "Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi",
    ),
    weekdays_short=("Paz", "Pzt", "Sal", "Çar", "Per", "Cum", "Cmt"),
    weekdays_min=("Pz", "Pt", "Sa", "Ça", "Pe", "Cu", "Ct"),
    relative_time=MappingProxyType({
        "future": "%s sonra",
        "past": "%s önce",
        "s": "birkaç saniye",
        "ss": "%d saniye",
        "m": "bir dakika",
        "mm": "%d dakika",
        "h": "bir saat",
        "hh": "%d saat",
        "d": "bir gün",
        "dd": "%d gün",
        "w": "bir hafta",
        "ww": "%d hafta",
        "M": "bir ay",
        "MM": "%d ay",
        "y": "bir yıl",
        "yy": "%d yıl",
    }),
    ordinal=_dotted_ordinal,
    formats=MappingProxyType({
        "LT": "HH:mm",
        "LTS": "HH:mm:ss",
        "L": "DD.MM.YYYY",
        "LL": "D MMMM YYYY",
        "LLL": "D MMMM YYYY HH:mm",
        "LLLL": "dddd, D MMMM YYYY HH:mm",
    }),
)


def _pick(names: tuple[str, ...], index: int) -> str:
    if 0 <= index < len(names):
        return names[index]
    return ""


class LocaleRegistry:
    """Lookup table of locales by name, falling back to English.

    Example:
        >>> registry = LocaleRegistry()
        >>> registry.month_name("tr", 0)
        'Ocak'
        >>> registry.month_name("xx", 0)  # unknown locale
        'January'
        >>> registry.month_name("en", 12)  # out of range
        ''
    """

    def __init__(self, locales: Iterable[Locale] = (EN, TR)) -> None:
        self._locales: dict[str, Locale] = {}
        for locale in locales:
            self.register(locale)

    def register(self, locale: Locale) -> "LocaleRegistry":
        """Add or replace a locale. Returns the registry for chaining."""
        self._locales[locale.name] = locale
        return self

    def get(self, name: str) -> Locale | None:
        return self._locales.get(name)

    def resolve(self, name: str) -> Locale:
        """Return the named locale, or English when it is not registered."""
        return self._locales.get(name, EN)

    def names(self) -> list[str]:
        return sorted(self._locales)

    def __contains__(self, name: object) -> bool:
        return name in self._locales

    def month_name(self, locale: str, index: int) -> str:
        return _pick(self.resolve(locale).months, index)

    def month_name_short(self, locale: str, index: int) -> str:
        return _pick(self.resolve(locale).months_short, index)

    def weekday_name(self, locale: str, index: int) -> str:
        return _pick(self.resolve(locale).weekdays, index)

    def weekday_name_short(self, locale: str, index: int) -> str:
        return _pick(self.resolve(locale).weekdays_short, index)

    def weekday_name_min(self, locale: str, index: int) -> str:
        return _pick(self.resolve(locale).weekdays_min, index)

    def ordinal(self, locale: str, n: int) -> str:
        return self.resolve(locale).ordinal(n)

    def relative_labels(self, locale: str) -> Mapping[str, Label]:
        return self.resolve(locale).relative_time

    def long_format(self, locale: str, key: str) -> str | None:
        """Template for a long-date token (LT, LTS, L, LL, LLL, LLLL)."""
        found = self.resolve(locale).formats.get(key)
        if found is None:
            found = EN.formats.get(key)
        return found
