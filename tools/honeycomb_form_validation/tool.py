"""Honeycomb widget form validation tool."""

import logging
from typing import Dict

from util.widgets.honeycomb import HoneycombWidgetForm

from .input_model import HoneycombFormInput
from .output_model import HoneycombFormOutput

logger = logging.getLogger(__name__)


def validate_honeycomb_form(query: HoneycombFormInput) -> Dict:
    """Validate a honeycomb widget configuration.

    Args:
        query: Submitted field values and the dashboard type.

    Returns:
        A dict with the validation outcome
        (dictionary representation of HoneycombFormOutput).
    """
    form = HoneycombWidgetForm(query.fields, is_template_dashboard=query.is_template_dashboard)
    errors = form.validate(strict=query.strict)

    if errors:
        logger.info("Honeycomb form rejected with %d error(s)", len(errors))
        return HoneycombFormOutput(valid=False, errors=errors).model_dump()

    return HoneycombFormOutput(valid=True, fields=form.fields_to_api()).model_dump()
