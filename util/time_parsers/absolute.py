"""
Parser for absolute time expressions.

Accepts literal calendar dates with optional time of day, from the year
alone up to a full timestamp:

    2024
    2024-05
    2024-05-01
    2024-05-01 08
    2024-05-01 08:30
    2024-05-01 08:30:15
"""

import calendar
import logging
import re
from datetime import datetime, tzinfo

from .timezone import get_timezone

logger = logging.getLogger(__name__)

MIN_YEAR = 1970
MAX_YEAR = 2038

ABSOLUTE_TIME_PATTERN = re.compile(
    r"(?P<year>\d{4})"
    r"(?:-(?P<month>\d{2})"
    r"(?:-(?P<day>\d{2})"
    r"(?:\s+(?P<hour>\d{1,2})"
    r"(?::(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2}))?)?)?)?)?",
    re.ASCII,
)


class AbsoluteTimeParser:
    """
    Parse absolute date/time strings.

    After a successful parse(), get_datetime() builds a timezone-aware datetime,
    filling omitted components either with their minimum (start of the period
    the expression names) or their maximum (end of that period).
    """

    def __init__(self):
        self._components: dict[str, int | None] | None = None

    def parse(self, text: str) -> bool:
        """
        Parse the given string.

        Args:
            text: The expression to parse.

        Returns:
            True if the whole string is a valid absolute time expression.
        """
        self._components = None

        if not isinstance(text, str):
            return False

        match = ABSOLUTE_TIME_PATTERN.fullmatch(text)
        if not match:
            return False

        components = {
            key: int(value) if value is not None else None
            for key, value in match.groupdict().items()
        }

        if not MIN_YEAR <= components["year"] <= MAX_YEAR:
            logger.debug("Year out of range in absolute time '%s'", text)
            return False

        try:
            # Validate against the calendar using the earliest candidate.
            datetime(
                components["year"],
                components["month"] or 1,
                components["day"] or 1,
                components["hour"] or 0,
                components["minute"] or 0,
                components["second"] or 0,
            )
        except ValueError:
            logger.debug("Invalid calendar value in absolute time '%s'", text)
            return False

        self._components = components
        return True

    def get_datetime(self, is_start: bool, timezone: tzinfo | None = None) -> datetime:
        """
        Build the datetime for the last successfully parsed expression.

        Args:
            is_start: Fill omitted components with their minimum if True,
                with their maximum otherwise.
            timezone: Timezone of the expression. Defaults to the configured one.

        Returns:
            A timezone-aware datetime.

        Raises:
            ValueError: If nothing has been parsed successfully.
        """
        if self._components is None:
            raise ValueError("No absolute time expression has been parsed")

        if timezone is None:
            timezone = get_timezone()

        year = self._components["year"]
        month = self._components["month"]
        day = self._components["day"]
        hour = self._components["hour"]
        minute = self._components["minute"]
        second = self._components["second"]

        if is_start:
            return datetime(
                year,
                month or 1,
                day or 1,
                hour or 0,
                minute or 0,
                second or 0,
                tzinfo=timezone,
            )

        month = month if month is not None else 12
        return datetime(
            year,
            month,
            day if day is not None else calendar.monthrange(year, month)[1],
            hour if hour is not None else 23,
            minute if minute is not None else 59,
            second if second is not None else 59,
            tzinfo=timezone,
        )
