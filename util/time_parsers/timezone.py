"""Timezone configuration for time expression parsing."""

import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

WIDGET_TIMEZONE = os.environ.get("WIDGET_TIMEZONE", "UTC")


@lru_cache(maxsize=32)
def get_timezone(name: str | None = None) -> ZoneInfo:
    """
    Resolve a timezone name (cached).

    Args:
        name: IANA timezone name. Defaults to the WIDGET_TIMEZONE setting.

    Returns:
        The resolved ZoneInfo.

    Raises:
        ValueError: If the timezone is unknown.
    """
    name = name or WIDGET_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone '{name}'") from e
