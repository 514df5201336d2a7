"""Absolute and relative time expression parsers used by widget fields."""

from .absolute import AbsoluteTimeParser
from .relative import RelativeTimeParser, RelativeTimeToken
from .timezone import WIDGET_TIMEZONE, get_timezone

__all__ = [
    "AbsoluteTimeParser",
    "RelativeTimeParser",
    "RelativeTimeToken",
    "WIDGET_TIMEZONE",
    "get_timezone",
]
