"""
Parser for relative time expressions.

A relative expression starts with "now" and is followed by any number of
tokens applied from left to right:

    offset      [+-]N[s|m|h|d|w|M|y]   shift by N units (seconds by default)
    precision   /[s|m|h|d|w|M|y]       round to the start (or end) of the unit

Examples: "now", "now-1h", "now/d", "now-7d/d", "now/w-1w".
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone, tzinfo

from dateutil.relativedelta import relativedelta

from .timezone import get_timezone

logger = logging.getLogger(__name__)

TOKEN_OFFSET = "offset"
TOKEN_PRECISION = "precision"

UNITS = "smhdwMy"
SUB_DAY_UNITS = frozenset("smh")

TOKEN_PATTERN = re.compile(
    rf"(?P<sign>[+-])(?P<value>\d+)(?P<suffix>[{UNITS}])?|/(?P<precision>[{UNITS}])",
    re.ASCII,
)

# Offsets finer than a day move along absolute time, coarser ones along the
# wall clock of the configured timezone.
_ABSOLUTE_OFFSETS = {
    "s": lambda n: timedelta(seconds=n),
    "m": lambda n: timedelta(minutes=n),
    "h": lambda n: timedelta(hours=n),
}
_CALENDAR_OFFSETS = {
    "d": lambda n: relativedelta(days=n),
    "w": lambda n: relativedelta(weeks=n),
    "M": lambda n: relativedelta(months=n),
    "y": lambda n: relativedelta(years=n),
}


@dataclass(frozen=True)
class RelativeTimeToken:
    """A single offset or precision token of a relative expression."""

    type: str
    suffix: str
    sign: str = ""
    value: int = 0

    @property
    def is_sub_day(self) -> bool:
        """Whether the token works at hour, minute or second granularity."""
        return self.suffix in SUB_DAY_UNITS


class RelativeTimeParser:
    """Parse "now"-based relative time expressions."""

    def __init__(self):
        self._tokens: list[RelativeTimeToken] | None = None

    @property
    def tokens(self) -> list[RelativeTimeToken]:
        """Tokens of the last successfully parsed expression."""
        return list(self._tokens or [])

    def parse(self, text: str) -> bool:
        """
        Parse the given string.

        Args:
            text: The expression to parse.

        Returns:
            True if the whole string is a valid relative time expression.
        """
        self._tokens = None

        if not isinstance(text, str) or not text.startswith("now"):
            return False

        tokens = []
        pos = len("now")

        while pos < len(text):
            match = TOKEN_PATTERN.match(text, pos)
            if not match:
                logger.debug("Unexpected input at position %d in '%s'", pos, text)
                return False

            if match.group("precision"):
                tokens.append(
                    RelativeTimeToken(type=TOKEN_PRECISION, suffix=match.group("precision"))
                )
            else:
                tokens.append(
                    RelativeTimeToken(
                        type=TOKEN_OFFSET,
                        sign=match.group("sign"),
                        value=int(match.group("value")),
                        suffix=match.group("suffix") or "s",
                    )
                )
            pos = match.end()

        self._tokens = tokens
        return True

    def get_datetime(
        self,
        is_start: bool,
        timezone: tzinfo | None = None,
        now: datetime | None = None,
    ) -> datetime:
        """
        Resolve the last successfully parsed expression.

        Args:
            is_start: Round precision tokens down to the start of the unit if
                True, up to its last second otherwise.
            timezone: Timezone used for calendar arithmetic. Defaults to the
                configured one.
            now: Reference point in time. Defaults to the current time.

        Returns:
            A timezone-aware datetime.

        Raises:
            ValueError: If nothing has been parsed successfully, or if an
                offset leaves the range of representable dates.
            OverflowError: If an offset is too large for date arithmetic.
        """
        if self._tokens is None:
            raise ValueError("No relative time expression has been parsed")

        if timezone is None:
            timezone = get_timezone()

        if now is None:
            now = datetime.now(timezone)
        result = now.astimezone(timezone).replace(microsecond=0)

        for token in self._tokens:
            if token.type == TOKEN_OFFSET:
                result = _apply_offset(result, token, timezone)
            else:
                result = _apply_precision(result, token.suffix, is_start)

        return result


def _apply_offset(value: datetime, token: RelativeTimeToken, timezone: tzinfo) -> datetime:
    amount = token.value if token.sign == "+" else -token.value

    if token.suffix in _ABSOLUTE_OFFSETS:
        shifted = value.astimezone(dt_timezone.utc) + _ABSOLUTE_OFFSETS[token.suffix](amount)
        return shifted.astimezone(timezone)

    return value + _CALENDAR_OFFSETS[token.suffix](amount)


def _apply_precision(value: datetime, unit: str, is_start: bool) -> datetime:
    if unit == "s":
        return value

    if unit == "m":
        start = value.replace(second=0)
        end_delta = relativedelta(minutes=1)
    elif unit == "h":
        start = value.replace(minute=0, second=0)
        end_delta = relativedelta(hours=1)
    elif unit == "d":
        start = value.replace(hour=0, minute=0, second=0)
        end_delta = relativedelta(days=1)
    elif unit == "w":
        start = value.replace(hour=0, minute=0, second=0) - relativedelta(days=value.weekday())
        end_delta = relativedelta(weeks=1)
    elif unit == "M":
        start = value.replace(day=1, hour=0, minute=0, second=0)
        end_delta = relativedelta(months=1)
    else:
        start = value.replace(month=1, day=1, hour=0, minute=0, second=0)
        end_delta = relativedelta(years=1)

    if is_start:
        return start

    return start + end_delta - relativedelta(seconds=1)
