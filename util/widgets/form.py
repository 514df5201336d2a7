"""Base class for dashboard widget configuration forms."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from .fields import WidgetField

logger = logging.getLogger(__name__)


class WidgetForm(ABC):
    """
    A set of widget fields populated from submitted values.

    Subclasses declare their fields in add_fields(). Fields passed as None are
    skipped, which lets a form hide fields depending on the dashboard type.
    """

    def __init__(self, values: dict[str, Any] | None = None, is_template_dashboard: bool = False):
        self.values = values or {}
        self.is_template_dashboard = is_template_dashboard
        self.fields: dict[str, WidgetField] = {}

        self.add_fields()

        for name, field in self.fields.items():
            if name in self.values:
                field.set_value(self.values[name])

    @abstractmethod
    def add_fields(self) -> "WidgetForm":
        """Declare the fields of the form."""

    def add_field(self, field: WidgetField | None) -> "WidgetForm":
        if field is not None:
            self.fields[field.name] = field
        return self

    def get_field(self, name: str) -> WidgetField:
        return self.fields[name]

    def get_fields_values(self) -> dict[str, Any]:
        return {name: field.get_value() for name, field in self.fields.items()}

    def validate(self, strict: bool = False) -> list[str]:
        """
        Validate every field of the form.

        Args:
            strict: Validate for saving, enforcing required fields.

        Returns:
            Error messages of all invalid fields, empty if the form is valid.
        """
        errors = []
        for field in self.fields.values():
            errors.extend(field.validate(strict))

        if errors:
            logger.debug("%s failed validation: %s", type(self).__name__, errors)
        return errors

    def fields_to_api(self) -> list[dict]:
        """Serialize the form into the name/value pairs a widget is stored as."""
        widget_fields: list[dict] = []
        for field in self.fields.values():
            field.to_api(widget_fields)
        return widget_fields
