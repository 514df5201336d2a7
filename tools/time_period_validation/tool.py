"""Time period validation tool for dashboard widget fields.

This module exposes the time period field validation: explicit bounds are
resolved to timestamps, references to dashboard or widget periods are
accepted as they are.
"""

import logging
from typing import Dict

from util.widgets import DataSource
from util.widgets.fields import WidgetField, WidgetFieldTimePeriod

from .input_model import TimePeriodValidationInput
from .output_model import TimePeriodValidationOutput

logger = logging.getLogger(__name__)


def validate_time_period_field(query: TimePeriodValidationInput) -> Dict:
    """Validate a widget time period value.

    Args:
        query: The raw value and the field's validation options.

    Returns:
        A dict with the validation outcome
        (dictionary representation of TimePeriodValidationOutput).
    """
    field = (
        WidgetFieldTimePeriod(query.name, query.label, is_date_only=query.is_date_only)
        .set_flags(WidgetField.FLAG_NOT_EMPTY if query.is_required else 0)
        .set_value(query.value)
    )
    errors = field.validate(strict=True)

    if errors:
        logger.info("Time period rejected: %s", "; ".join(errors))
        output = TimePeriodValidationOutput(
            valid=False,
            data_source=field.data_source.name,
            value=field.get_value(),
            errors=errors,
        )
        return output.model_dump(by_alias=True)

    period = None
    if field.data_source == DataSource.DEFAULT:
        period = field.period.model_dump(by_alias=True)

    widget_fields: list[dict] = []
    field.to_api(widget_fields)

    output = TimePeriodValidationOutput(
        valid=True,
        data_source=field.data_source.name,
        value=field.get_value(),
        period=period,
        fields=widget_fields,
    )
    return output.model_dump(by_alias=True)
