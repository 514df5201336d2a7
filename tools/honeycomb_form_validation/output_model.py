"""
Output model for honeycomb widget form validation.
"""

from pydantic import BaseModel, Field


class WidgetFieldEntry(BaseModel):
    """A single serialized widget field."""

    type: int = Field(..., description="Storage type of the value")
    name: str = Field(..., description="Field name, with [index] for list entries")
    value: int | str = Field(..., description="Field value")


class HoneycombFormOutput(BaseModel):
    """
    Output model for honeycomb widget form validation.

    Only values that differ from the field defaults are serialized.
    """

    valid: bool = Field(..., description="Whether the form was accepted")
    fields: list[WidgetFieldEntry] = Field(
        default_factory=list, description="Serialized widget fields"
    )
    errors: list[str] = Field(default_factory=list, description="Error messages")
