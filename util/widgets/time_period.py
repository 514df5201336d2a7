"""
Time period widget field values and their validation.

A time period is either an explicit pair of time expressions
({"from": ..., "to": ...}) or a reference to a period owned by another
element of the dashboard ({"reference": ...}). Explicit bounds accept
absolute ("2024-05-01 08:00:00") and relative ("now-1h/h") expressions.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, tzinfo
from enum import IntEnum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from util.time_parsers import AbsoluteTimeParser, RelativeTimeParser, get_timezone

from .rules import STRING_MAX_LENGTH, WidgetFieldError, ensure_valid, string_rule

logger = logging.getLogger(__name__)

REFERENCE_DASHBOARD = "DASHBOARD"
DEFAULT_VALUE = {"from": "", "to": ""}


class DataSource(IntEnum):
    """Origin of the effective time period."""

    DEFAULT = 0
    WIDGET = 1
    DASHBOARD = 2


class DefaultPeriod(BaseModel):
    """Explicit period bounds entered by the user."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: str = Field("", alias="from")
    to: str = ""

    @property
    def data_source(self) -> DataSource:
        return DataSource.DEFAULT


class ReferencePeriod(BaseModel):
    """Period supplied by the dashboard or by another widget."""

    model_config = ConfigDict(frozen=True)

    reference: str

    @property
    def data_source(self) -> DataSource:
        if self.reference == REFERENCE_DASHBOARD:
            return DataSource.DASHBOARD
        return DataSource.WIDGET


TimePeriodValue = Union[DefaultPeriod, ReferencePeriod]


class ParsedPeriod(BaseModel):
    """Resolved bounds as unix timestamps; 0 means the bound is not set."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: int = Field(0, alias="from")
    to: int = 0


class ValidatedTimePeriod(BaseModel):
    """An accepted time period value together with its resolved bounds."""

    value: TimePeriodValue
    period: ParsedPeriod = ParsedPeriod()

    @property
    def data_source(self) -> DataSource:
        return self.value.data_source


class PeriodBoundError(ValueError):
    """Base class for semantic errors in explicit period bounds."""


class TimeParseError(PeriodBoundError):
    """Raised when a bound is neither an absolute nor a relative expression."""


class GranularityError(PeriodBoundError):
    """Raised when a date-only bound carries a time of day."""


class RangeOrderError(PeriodBoundError):
    """Raised when the start of the period is not before its end."""


class TimePeriodError(WidgetFieldError):
    """
    Raised when explicit period bounds are invalid.

    Every semantic failure maps to the same user-facing message; the specific
    PeriodBoundError is available as `reason` and as the exception cause.
    """

    def __init__(self, messages: list[str], reason: PeriodBoundError):
        super().__init__(messages)
        self.reason = reason


def get_data_source(value: Any) -> DataSource:
    """Determine where the effective period comes from based on the value shape."""
    if isinstance(value, Mapping) and "reference" in value:
        if value["reference"] == REFERENCE_DASHBOARD:
            return DataSource.DASHBOARD
        return DataSource.WIDGET
    return DataSource.DEFAULT


def time_period_rules(data_source: DataSource, is_required: bool = False) -> dict:
    """
    Structural rules for a time period value.

    Args:
        data_source: Shape the value is validated as.
        is_required: Whether the bounds (or the reference) must not be empty.
    """
    keys = ("from", "to") if data_source == DataSource.DEFAULT else ("reference",)

    return {
        "type": "object",
        "properties": {
            key: string_rule(STRING_MAX_LENGTH, not_empty=is_required) for key in keys
        },
        "required": list(keys),
        "additionalProperties": False,
    }


def validate_time_period(
    value: Mapping | DefaultPeriod | ReferencePeriod,
    *,
    is_date_only: bool = False,
    is_required: bool = False,
    label: str = "Time period",
    now: datetime | None = None,
    timezone: tzinfo | None = None,
) -> ValidatedTimePeriod:
    """
    Validate a time period value.

    The value is first checked structurally. Reference values are then
    accepted as they are, while explicit bounds are parsed as absolute or
    relative time expressions and checked for granularity and order.

    Args:
        value: Raw value ({"from", "to"} or {"reference"}) or a parsed variant.
        is_date_only: Only accept midnight-aligned, day-granularity bounds.
        is_required: Reject empty bounds (or an empty reference).
        label: Field name used in error messages.
        now: Reference point for relative expressions. Defaults to the current time.
        timezone: Timezone of the expressions. Defaults to the configured one.

    Returns:
        The accepted value with its resolved period. The input is not modified.

    Raises:
        FieldStructureError: If the value does not have a valid shape.
        TimePeriodError: If explicit bounds cannot be parsed, are too fine for
            date-only mode, or are out of order.
    """
    if isinstance(value, BaseModel):
        raw = value.model_dump(by_alias=True)
    elif isinstance(value, Mapping):
        raw = {key: item for key, item in value.items() if key != "data_source"}
    else:
        raw = value

    data_source = get_data_source(raw)
    ensure_valid(raw, time_period_rules(data_source, is_required), label)

    if data_source != DataSource.DEFAULT:
        return ValidatedTimePeriod(value=ReferencePeriod(reference=raw["reference"]))

    period_value = DefaultPeriod.model_validate(raw)
    timezone = timezone or get_timezone()

    try:
        period = resolve_period(period_value, is_date_only, timezone, now)
    except PeriodBoundError as e:
        expected = "a date is expected" if is_date_only else "a time is expected"
        logger.debug("Time period '%s' rejected: %s", label, e)
        raise TimePeriodError(
            [f'Invalid parameter "{label}": {expected}.'], reason=e
        ) from e

    return ValidatedTimePeriod(value=period_value, period=period)


def resolve_period(
    value: DefaultPeriod,
    is_date_only: bool,
    timezone: tzinfo,
    now: datetime | None = None,
) -> ParsedPeriod:
    """
    Resolve explicit bounds to timestamps.

    Raises:
        PeriodBoundError: On the first bound that fails, or if the bounds are
            out of order.
    """
    start = resolve_bound(value.from_, is_date_only, timezone, now)
    end = resolve_bound(value.to, is_date_only, timezone, now)

    if start != 0 and end != 0 and start >= end:
        raise RangeOrderError(f"Period start {start} is not before period end {end}")

    return ParsedPeriod(from_=start, to=end)


def resolve_bound(
    text: str,
    is_date_only: bool,
    timezone: tzinfo,
    now: datetime | None = None,
) -> int:
    """
    Resolve a single bound to a unix timestamp.

    Absolute expressions are tried first, then relative ones. An empty bound
    resolves to 0.

    Raises:
        TimeParseError: If neither parser accepts the expression, or if it
            resolves outside the range of representable dates.
        GranularityError: If date-only mode is violated.
    """
    if text == "":
        return 0

    absolute_parser = AbsoluteTimeParser()
    if absolute_parser.parse(text):
        try:
            resolved = absolute_parser.get_datetime(True, timezone)
            timestamp = int(resolved.timestamp())
        except (ValueError, OverflowError) as e:
            raise TimeParseError(f"'{text}' is out of the supported time range") from e

        if is_date_only and resolved.strftime("%H:%M:%S") != "00:00:00":
            raise GranularityError(f"'{text}' is not at midnight")

        return timestamp

    relative_parser = RelativeTimeParser()
    if relative_parser.parse(text):
        if is_date_only and any(token.is_sub_day for token in relative_parser.tokens):
            raise GranularityError(f"'{text}' uses a unit finer than a day")

        try:
            return int(relative_parser.get_datetime(True, timezone, now).timestamp())
        except (ValueError, OverflowError) as e:
            raise TimeParseError(f"'{text}' is out of the supported time range") from e

    raise TimeParseError(f"'{text}' is not a valid time expression")
