"""
Output model for time period validation.

Defines the structure of time period validation results.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ResolvedPeriod(BaseModel):
    """Resolved bounds as unix timestamps, 0 meaning unbounded."""

    model_config = {"populate_by_name": True}

    from_: int = Field(0, alias="from")
    to: int = 0


class WidgetFieldEntry(BaseModel):
    """A serialized widget field value."""

    type: int = Field(..., description="Storage type of the value")
    name: str = Field(..., description="Field name, e.g. time_period[from]")
    value: str = Field(..., description="Field value")


class TimePeriodValidationOutput(BaseModel):
    """
    Output model for time period validation.

    An invalid value is reported together with the default value the field
    falls back to.
    """

    valid: bool = Field(..., description="Whether the value was accepted")
    data_source: str = Field(
        ...,
        description="Origin of the period: DEFAULT, WIDGET or DASHBOARD",
        examples=["DEFAULT"],
    )
    value: dict = Field(
        ...,
        description="Accepted value, or the default value if validation failed",
        examples=[{"from": "now-7d/d", "to": "now"}],
    )
    period: Optional[ResolvedPeriod] = Field(
        None,
        description="Resolved bounds of an accepted explicit period",
    )
    fields: list[WidgetFieldEntry] = Field(
        default_factory=list,
        description="Serialized widget fields of an accepted non-default value",
    )
    errors: list[str] = Field(default_factory=list, description="Error messages")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        json_schema_extra = {
            "examples": [
                {
                    "valid": True,
                    "data_source": "DEFAULT",
                    "value": {"from": "2024-01-01", "to": "2024-01-02"},
                    "period": {"from": 1704067200, "to": 1704153600},
                    "fields": [
                        {"type": 1, "name": "time_period[from]", "value": "2024-01-01"},
                        {"type": 1, "name": "time_period[to]", "value": "2024-01-02"},
                    ],
                    "errors": [],
                },
                {
                    "valid": False,
                    "data_source": "DEFAULT",
                    "value": {"from": "", "to": ""},
                    "period": None,
                    "fields": [],
                    "errors": ['Invalid parameter "Time period": a time is expected.'],
                },
                {
                    "valid": True,
                    "data_source": "DASHBOARD",
                    "value": {"reference": "DASHBOARD"},
                    "period": None,
                    "fields": [
                        {"type": 1, "name": "time_period[reference]", "value": "DASHBOARD"}
                    ],
                    "errors": [],
                },
            ]
        }
