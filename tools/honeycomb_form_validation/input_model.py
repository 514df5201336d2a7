"""
Input model for honeycomb widget form validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class HoneycombFormInput(BaseModel):
    """
    Input model for honeycomb widget form validation.

    Field values are keyed by field name; missing fields take their defaults.
    """

    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Submitted field values keyed by field name",
        examples=[{"items": ["CPU utilization"], "bg_color": "FFFFFF"}],
    )
    is_template_dashboard: bool = Field(
        False, description="Whether the widget belongs to a template dashboard"
    )
    strict: bool = Field(
        True, description="Validate for saving, enforcing required fields"
    )
