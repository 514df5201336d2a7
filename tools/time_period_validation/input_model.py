"""
Input model for time period validation.

Carries the raw time period value of a widget field as submitted by a form.
"""

from typing import Any

from pydantic import BaseModel, Field


class TimePeriodValidationInput(BaseModel):
    """
    Input model for time period validation.

    The value is either {"from": ..., "to": ...} or {"reference": ...}.
    """

    value: Any = Field(
        ...,
        description="Time period value: explicit from/to bounds or a reference",
        examples=[
            {"from": "now-7d/d", "to": "now"},
            {"from": "2024-01-01", "to": "2024-02-01"},
            {"reference": "DASHBOARD"},
        ],
    )
    is_date_only: bool = Field(
        False, description="Only accept whole days, without a time of day"
    )
    is_required: bool = Field(
        False, description="Reject empty bounds or an empty reference"
    )
    name: str = Field("time_period", description="Field name the value is stored under")
    label: str = Field("Time period", description="Field name used in error messages")
