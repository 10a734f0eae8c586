"""Template substitution shared by Instant.format and Duration.format.

A template is scanned for `[escaped text]` and maximal runs of ASCII letters.
Escaped text is emitted without the brackets. Each letter run is looked up
as a whole in the token table; unknown runs are emitted unchanged, so
"YYYY-MM-DD" renders three tokens while "YYYYMMDD" is one unknown run.
"""

import math
import re
from collections.abc import Callable, Mapping
from typing import TypeAlias

TokenValue: TypeAlias = str | int | float
TokenTable: TypeAlias = Mapping[str, Callable[[], TokenValue]]

TOKEN_PATTERN = re.compile(r"\[([^\]]*)\]|([A-Za-z]+)")


def stringify(value: TokenValue) -> str:
    """Render a token value the way a JavaScript template would.

    Examples:
        >>> stringify(5.0)
        '5'
        >>> stringify(1.5)
        '1.5'
        >>> stringify(float("nan"))
        'NaN'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def pad(value: int, width: int = 2) -> str:
    """Zero-pad an integer to `width` digits, keeping the sign in front."""
    if value < 0:
        return "-" + str(-value).zfill(width)
    return str(value).zfill(width)


def expand(template: str, expansions: Mapping[str, str]) -> str:
    """Replace whole letter runs by other templates, leaving escapes intact.

    Used for locale long formats: "LL" becomes "MMMM D, YYYY" before the
    tokens of the result are rendered.
    """

    def substitute(match: re.Match[str]) -> str:
        run = match.group(2)
        if run is None:
            return match.group(0)
        return expansions.get(run, run)

    return TOKEN_PATTERN.sub(substitute, template)


def render(template: str, tokens: TokenTable) -> str:
    """Substitute every known token of `template`.

    Example:
        >>> render("[Year] YYYY", {"YYYY": lambda: 2024})
        'Year 2024'
    """

    def substitute(match: re.Match[str]) -> str:
        escaped, run = match.groups()
        if escaped is not None:
            return escaped
        producer = tokens.get(run)
        if producer is None:
            return run
        return stringify(producer())

    return TOKEN_PATTERN.sub(substitute, template)
