"""Dashboard widget fields, forms and their validation."""

from .rules import FieldStructureError, WidgetFieldError
from .time_period import (
    DataSource,
    DefaultPeriod,
    ParsedPeriod,
    ReferencePeriod,
    TimePeriodError,
    ValidatedTimePeriod,
    validate_time_period,
)

__all__ = [
    "DataSource",
    "DefaultPeriod",
    "FieldStructureError",
    "ParsedPeriod",
    "ReferencePeriod",
    "TimePeriodError",
    "ValidatedTimePeriod",
    "WidgetFieldError",
    "validate_time_period",
]
