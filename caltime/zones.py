"""Time zone resolution.

The engine never reads DST tables itself. It asks a ZoneResolver for the UTC
offset of a named zone at an instant, and asks the host (through
dateutil's tzlocal) for the local offset when no zone is configured.
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from dateutil import tz
from typing_extensions import override

from caltime.civil import CivilFields, decode
from caltime.util import DAY, MINUTE

if TYPE_CHECKING:
    from caltime.config import Config
    from caltime.instant import Instant

logger = logging.getLogger(__name__)

MIN_OFFSET = -12 * 60
MAX_OFFSET = 14 * 60

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# datetime only covers years 1-9999; lookups outside are clamped into range
_LOOKUP_MIN_MS = -62135596800000 + DAY
_LOOKUP_MAX_MS = 253402300800000 - 2 * DAY

_OFFSET_PATTERN = re.compile(r"^([+-])?(\d{1,2})(?::?(\d{2}))?$")


class UnknownTimezoneError(ValueError):
    """Raised when a zone name cannot be resolved."""

    def __init__(self, zone: Any):
        self.zone: Any = zone
        super().__init__(
            f"Unknown timezone {zone!r}.\n"
            f"Hint: use an IANA name such as 'Europe/Istanbul' or "
            f"'America/New_York'.\n"
            f"  from caltime import get_timezones\n"
            f"  get_timezones()  # every name the host database knows"
        )


@dataclass(frozen=True)
class ZoneResolution:
    fields: CivilFields
    offset: int


def _as_datetime(epoch_ms: int) -> datetime:
    clamped = min(max(epoch_ms, _LOOKUP_MIN_MS), _LOOKUP_MAX_MS)
    return _EPOCH + timedelta(milliseconds=clamped)


def _minutes(delta: timedelta | None) -> int:
    if delta is None:
        return 0
    return round(delta.total_seconds() / 60)


class ZoneResolver(ABC):
    """Answers "what is the UTC offset of this zone at this instant"."""

    @abstractmethod
    def offset(self, zone: str, epoch_ms: int) -> int:
        """Return the UTC offset in minutes of `zone` at `epoch_ms`.

        Raises:
            UnknownTimezoneError: If the zone name is not known
        """
        pass

    def resolve(self, zone: str, epoch_ms: int) -> ZoneResolution:
        """Civil fields and offset of the instant as seen in `zone`."""
        offset = self.offset(zone, epoch_ms)
        logger.debug("Resolved %s at %d ms to offset %d", zone, epoch_ms, offset)
        return ZoneResolution(fields=decode(epoch_ms + offset * MINUTE), offset=offset)

    def check(self, zone: str) -> None:
        """Raise UnknownTimezoneError if `zone` cannot be resolved."""
        self.offset(zone, 0)


class ZoneInfoResolver(ZoneResolver):
    """Resolver backed by the standard library's zoneinfo database."""

    @override
    def offset(self, zone: str, epoch_ms: int) -> int:
        if not isinstance(zone, str) or not zone:
            raise UnknownTimezoneError(zone)
        try:
            info = ZoneInfo(zone)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise UnknownTimezoneError(zone) from exc
        return _minutes(_as_datetime(epoch_ms).astimezone(info).utcoffset())


class DateutilResolver(ZoneResolver):
    """Resolver backed by dateutil's tz.gettz (also accepts POSIX TZ strings)."""

    @override
    def offset(self, zone: str, epoch_ms: int) -> int:
        # gettz("") means "local zone", which is never what a caller asked for
        info = tz.gettz(zone) if isinstance(zone, str) and zone else None
        if info is None:
            raise UnknownTimezoneError(zone)
        return _minutes(_as_datetime(epoch_ms).astimezone(info).utcoffset())


class FixedOffsetResolver(ZoneResolver):
    """Resolver with a fixed offset per zone name, independent of the host.

    Example:
        >>> resolver = FixedOffsetResolver({"Europe/Istanbul": 180, "UTC": 0})
        >>> resolver.offset("Europe/Istanbul", 0)
        180
    """

    def __init__(self, offsets: Mapping[str, int]):
        self.offsets: dict[str, int] = dict(offsets)

    @override
    def offset(self, zone: str, epoch_ms: int) -> int:
        try:
            return self.offsets[zone]
        except (KeyError, TypeError):
            raise UnknownTimezoneError(zone) from None


_HOST_ZONE = tz.tzlocal()


def host_offset(epoch_ms: int) -> int:
    """UTC offset in minutes of the host's local zone at `epoch_ms`."""
    moment = _as_datetime(epoch_ms)
    try:
        delta = moment.astimezone(_HOST_ZONE).utcoffset()
    except (OverflowError, OSError, ValueError):
        logger.warning(
            "Host timezone has no offset for %d ms; using the current offset",
            epoch_ms,
        )
        delta = datetime.now(_HOST_ZONE).utcoffset()
    return _minutes(delta)


def is_valid_offset(minutes: int | float) -> bool:
    return MIN_OFFSET <= minutes <= MAX_OFFSET


def parse_offset(text: str) -> int | None:
    """Parse "+03:00", "+0300", "-05", "0530" or "Z" into minutes.

    Returns None when the text is not an offset.
    """
    text = text.strip()
    if text.upper() in ("Z", "UTC"):
        return 0
    match = _OFFSET_PATTERN.match(text)
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    total = int(hours) * 60 + int(minutes or 0)
    return -total if sign == "-" else total


def format_offset(minutes: int, colon: bool = True) -> str:
    """Render an offset in minutes as "+05:30" (or "+0530")."""
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    separator = ":" if colon else ""
    return f"{sign}{hours:02d}{separator}{mins:02d}"


def get_timezones() -> list[str]:
    """All zone names known to the host's tz database, sorted."""
    return sorted(available_timezones())


def get_timezone_offset(
    zone: str, value: Any = None, config: "Config | None" = None
) -> int | float:
    """UTC offset in minutes of `zone` at `value` (default: now).

    Raises:
        UnknownTimezoneError: If the zone cannot be resolved
    """
    # Import at runtime to avoid circular dependency
    from caltime.config import DEFAULT_CONFIG
    from caltime.instant import create_time

    config = config or DEFAULT_CONFIG
    instant = create_time(value, config)
    if not instant.is_valid():
        config.resolver.check(zone)
        return math.nan
    return config.resolver.offset(zone, instant.epoch_ms)


def create_time_in_zone(
    value: Any, zone: str, config: "Config | None" = None
) -> "Instant":
    """Create an Instant from `value` and view it in `zone`."""
    from caltime.instant import create_time

    return create_time(value, config).tz(zone)
