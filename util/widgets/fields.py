"""
Dashboard widget form fields.

Each field owns a value, a default and a set of flags, knows the structural
rules its value must satisfy and serializes itself into the name/value pairs
a widget configuration is stored as.
"""

import copy
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, tzinfo
from enum import IntEnum
from typing import Any

from .rules import STRING_MAX_LENGTH, WidgetFieldError, check_value, string_rule
from .time_period import (
    DEFAULT_VALUE as TIME_PERIOD_DEFAULT,
    DataSource,
    ParsedPeriod,
    get_data_source,
    time_period_rules,
    validate_time_period,
)

logger = logging.getLogger(__name__)

INT32_MIN = -2147483648
INT32_MAX = 2147483647

FOREIGN_REFERENCE_KEY = "_reference"
DATA_TYPE_HOST_IDS = "hostids"

TAG_OPERATOR_LIKE = 0
TAG_OPERATOR_EQUAL = 1
TAG_OPERATOR_NOT_LIKE = 2
TAG_OPERATOR_NOT_EQUAL = 3
TAG_OPERATOR_EXISTS = 4
TAG_OPERATOR_NOT_EXISTS = 5

COLOR_PATTERN = r"^[0-9A-Fa-f]{6}\Z"
OPTIONAL_COLOR_PATTERN = r"^([0-9A-Fa-f]{6})?\Z"
THRESHOLD_PATTERN = r"^-?[0-9]+(\.[0-9]+)?[KMGTsmhdw]?\Z"

_NUMERIC_STRING = re.compile(r"-?[0-9]+")
_SUFFIX_MULTIPLIERS = {
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


class WidgetFieldType(IntEnum):
    """Storage type of a serialized widget field value."""

    INT32 = 0
    STR = 1
    GROUP = 2
    HOST = 3


def create_typed_reference(reference: str, data_type: str) -> str:
    """Build a reference to data of the given type, e.g. "DASHBOARD._hostids"."""
    return f"{reference}._{data_type}"


def _to_int(value: Any) -> Any:
    if isinstance(value, str) and _NUMERIC_STRING.fullmatch(value):
        return int(value)
    return value


class WidgetField(ABC):
    """Base class for widget form fields."""

    FLAG_NOT_EMPTY = 0x01
    FLAG_LABEL_ASTERISK = 0x02

    DEFAULT_VALUE: Any = None
    SAVE_TYPE = WidgetFieldType.STR

    def __init__(self, name: str, label: str | None = None):
        self.name = name
        self.label = label
        self.full_name: str | None = None
        self.flags = 0
        self.default = copy.deepcopy(self.DEFAULT_VALUE)
        self.value: Any = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.label or self.name

    @property
    def is_not_empty(self) -> bool:
        return bool(self.flags & self.FLAG_NOT_EMPTY)

    def set_default(self, default: Any) -> "WidgetField":
        self.default = default
        return self

    def set_flags(self, flags: int) -> "WidgetField":
        self.flags = flags
        return self

    def set_value(self, value: Any) -> "WidgetField":
        self.value = value
        return self

    def get_value(self) -> Any:
        return copy.deepcopy(self.default if self.value is None else self.value)

    @abstractmethod
    def validation_rules(self, strict: bool = False) -> dict:
        """
        JSON schema the field value must satisfy.

        Args:
            strict: Apply the rules for saving, where FLAG_NOT_EMPTY is enforced.
        """

    def validate(self, strict: bool = False) -> list[str]:
        """
        Validate the current value.

        An invalid value is replaced with the field default.

        Returns:
            A list of error messages, empty if the value is valid.
        """
        errors = check_value(self.get_value(), self.validation_rules(strict), self.display_name)
        if errors:
            self._reset()
        return errors

    def to_api(self, widget_fields: list[dict]) -> None:
        """Append the serialized value to widget_fields unless it equals the default."""
        value = self.get_value()
        if value is not None and value != self.default:
            widget_fields.append(
                {"type": int(self.SAVE_TYPE), "name": self.name, "value": value}
            )

    def _reset(self) -> None:
        logger.info("Resetting widget field '%s' to its default value", self.name)
        self.value = None


class WidgetFieldCheckBox(WidgetField):
    DEFAULT_VALUE = 0
    SAVE_TYPE = WidgetFieldType.INT32

    def set_value(self, value: Any) -> "WidgetField":
        return super().set_value(_to_int(value))

    def validation_rules(self, strict: bool = False) -> dict:
        return {"type": "integer", "enum": [0, 1]}


class WidgetFieldCheckBoxList(WidgetField):
    """List of checked option keys."""

    DEFAULT_VALUE: list = []
    SAVE_TYPE = WidgetFieldType.INT32

    def __init__(self, name: str, label: str | None = None, values: dict[int, str] | None = None):
        super().__init__(name, label)
        self.values = values or {}

    def set_value(self, value: Any) -> "WidgetField":
        if isinstance(value, list):
            value = [_to_int(item) for item in value]
        return super().set_value(value)

    def validation_rules(self, strict: bool = False) -> dict:
        rules = {
            "type": "array",
            "items": {"type": "integer", "enum": list(self.values)},
            "uniqueItems": True,
        }
        if strict and self.is_not_empty:
            rules["minItems"] = 1
        return rules

    def to_api(self, widget_fields: list[dict]) -> None:
        value = self.get_value()
        if value != self.default:
            for index, item in enumerate(value):
                widget_fields.append(
                    {"type": int(self.SAVE_TYPE), "name": f"{self.name}[{index}]", "value": item}
                )


class WidgetFieldColor(WidgetField):
    DEFAULT_VALUE = ""

    def validation_rules(self, strict: bool = False) -> dict:
        pattern = COLOR_PATTERN if strict and self.is_not_empty else OPTIONAL_COLOR_PATTERN
        return {
            "type": "string",
            "pattern": pattern,
            "x-message": "a hexadecimal color code (6 symbols) is expected",
        }


class WidgetFieldIntegerBox(WidgetField):
    """Integer input limited to a range."""

    SAVE_TYPE = WidgetFieldType.INT32

    def __init__(
        self,
        name: str,
        label: str | None = None,
        min_value: int = INT32_MIN,
        max_value: int = INT32_MAX,
    ):
        super().__init__(name, label)
        self.min_value = min_value
        self.max_value = max_value

    def set_value(self, value: Any) -> "WidgetField":
        if value == "":
            value = None
        return super().set_value(_to_int(value))

    def validation_rules(self, strict: bool = False) -> dict:
        rules = {"type": "integer", "minimum": self.min_value, "maximum": self.max_value}
        if not (strict and self.is_not_empty):
            rules["type"] = ["integer", "null"]
        return rules


class WidgetFieldTextBox(WidgetField):
    DEFAULT_VALUE = ""

    def validation_rules(self, strict: bool = False) -> dict:
        return string_rule(STRING_MAX_LENGTH, not_empty=strict and self.is_not_empty)


class WidgetFieldTextArea(WidgetFieldTextBox):
    pass


class WidgetFieldRadioButtonList(WidgetField):
    """One option out of a fixed set of integer keys."""

    SAVE_TYPE = WidgetFieldType.INT32

    def __init__(self, name: str, label: str | None = None, values: dict[int, str] | None = None):
        super().__init__(name, label)
        self.values = values or {}

    def set_value(self, value: Any) -> "WidgetField":
        return super().set_value(_to_int(value))

    def validation_rules(self, strict: bool = False) -> dict:
        return {"type": "integer", "enum": list(self.values)}


class WidgetFieldSelect(WidgetFieldRadioButtonList):
    pass


class WidgetFieldMultiSelect(WidgetField):
    """
    Selection of object IDs.

    Instead of IDs the value may hold a reference to IDs supplied by the
    dashboard or another widget: {"_reference": "DASHBOARD._hostids"}.
    """

    DEFAULT_VALUE: list = []

    def set_value(self, value: Any) -> "WidgetField":
        if isinstance(value, list):
            value = [str(item) if isinstance(item, int) else item for item in value]
        return super().set_value(value)

    def validation_rules(self, strict: bool = False) -> dict:
        ids_rule = {
            "type": "array",
            "items": {"type": "string", "pattern": r"^[1-9][0-9]*\Z"},
            "uniqueItems": True,
        }
        if strict and self.is_not_empty:
            ids_rule["minItems"] = 1

        reference_rule = {
            "type": "object",
            "properties": {FOREIGN_REFERENCE_KEY: {"type": "string", "minLength": 1}},
            "required": [FOREIGN_REFERENCE_KEY],
            "additionalProperties": False,
        }
        return {"anyOf": [ids_rule, reference_rule]}

    def to_api(self, widget_fields: list[dict]) -> None:
        value = self.get_value()
        if value == self.default:
            return

        if isinstance(value, dict):
            widget_fields.append(
                {
                    "type": int(WidgetFieldType.STR),
                    "name": f"{self.name}[{FOREIGN_REFERENCE_KEY}]",
                    "value": value[FOREIGN_REFERENCE_KEY],
                }
            )
            return

        for index, item in enumerate(value):
            widget_fields.append(
                {"type": int(self.SAVE_TYPE), "name": f"{self.name}[{index}]", "value": item}
            )


class WidgetFieldMultiSelectGroup(WidgetFieldMultiSelect):
    SAVE_TYPE = WidgetFieldType.GROUP


class WidgetFieldMultiSelectHost(WidgetFieldMultiSelect):
    SAVE_TYPE = WidgetFieldType.HOST


class WidgetFieldItemPatternSelect(WidgetField):
    """List of item name patterns."""

    DEFAULT_VALUE: list = []

    def validation_rules(self, strict: bool = False) -> dict:
        rules = {
            "type": "array",
            "items": string_rule(STRING_MAX_LENGTH, not_empty=True),
            "uniqueItems": True,
        }
        if strict and self.is_not_empty:
            rules["minItems"] = 1
        return rules

    def to_api(self, widget_fields: list[dict]) -> None:
        value = self.get_value()
        if value != self.default:
            for index, pattern in enumerate(value):
                widget_fields.append(
                    {"type": int(self.SAVE_TYPE), "name": f"{self.name}[{index}]", "value": pattern}
                )


class WidgetFieldTags(WidgetField):
    """Tag filter rows of {tag, operator, value}."""

    DEFAULT_VALUE: list = []

    def set_value(self, value: Any) -> "WidgetField":
        if isinstance(value, list):
            rows = []
            for row in value:
                if isinstance(row, dict):
                    if row.get("tag", "") == "" and row.get("value", "") == "":
                        continue
                    row = {**row, "operator": _to_int(row.get("operator", TAG_OPERATOR_LIKE))}
                rows.append(row)
            value = rows
        return super().set_value(value)

    def validation_rules(self, strict: bool = False) -> dict:
        return {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "tag": string_rule(),
                    "operator": {
                        "type": "integer",
                        "enum": [
                            TAG_OPERATOR_LIKE,
                            TAG_OPERATOR_EQUAL,
                            TAG_OPERATOR_NOT_LIKE,
                            TAG_OPERATOR_NOT_EQUAL,
                            TAG_OPERATOR_EXISTS,
                            TAG_OPERATOR_NOT_EXISTS,
                        ],
                    },
                    "value": string_rule(),
                },
                "required": ["tag", "operator", "value"],
                "additionalProperties": False,
            },
        }

    def to_api(self, widget_fields: list[dict]) -> None:
        for index, row in enumerate(self.get_value()):
            widget_fields.extend(
                [
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[{index}][tag]",
                        "value": row["tag"],
                    },
                    {
                        "type": int(WidgetFieldType.INT32),
                        "name": f"{self.name}[{index}][operator]",
                        "value": row["operator"],
                    },
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[{index}][value]",
                        "value": row["value"],
                    },
                ]
            )


def threshold_value(threshold: str) -> float:
    """Numeric value of a threshold, with unit suffixes expanded."""
    suffix = threshold[-1]
    if suffix in _SUFFIX_MULTIPLIERS:
        return float(threshold[:-1]) * _SUFFIX_MULTIPLIERS[suffix]
    return float(threshold)


class WidgetFieldThresholds(WidgetField):
    """Color thresholds of {color, threshold}, kept in ascending order."""

    DEFAULT_VALUE: list = []

    def set_value(self, value: Any) -> "WidgetField":
        if isinstance(value, list):
            value = [
                row
                for row in value
                if not (
                    isinstance(row, dict)
                    and row.get("color", "") == ""
                    and row.get("threshold", "") == ""
                )
            ]
        return super().set_value(value)

    def validation_rules(self, strict: bool = False) -> dict:
        return {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "color": {
                        "type": "string",
                        "pattern": COLOR_PATTERN,
                        "x-message": "a hexadecimal color code (6 symbols) is expected",
                    },
                    "threshold": {
                        "type": "string",
                        "pattern": THRESHOLD_PATTERN,
                        "x-message": "a number is expected",
                    },
                },
                "required": ["color", "threshold"],
                "additionalProperties": False,
            },
        }

    def validate(self, strict: bool = False) -> list[str]:
        errors = super().validate(strict)
        if not errors and self.value:
            self.value = sorted(self.value, key=lambda row: threshold_value(row["threshold"]))
        return errors

    def to_api(self, widget_fields: list[dict]) -> None:
        for index, row in enumerate(self.get_value()):
            widget_fields.extend(
                [
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[{index}][color]",
                        "value": row["color"],
                    },
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[{index}][threshold]",
                        "value": row["threshold"],
                    },
                ]
            )


class WidgetFieldTimePeriod(WidgetField):
    """
    Time period given either as explicit bounds or as a reference.

    Validation resolves explicit bounds to timestamps (see `period`); an invalid
    value is replaced with the default {"from": "", "to": ""}.
    """

    DEFAULT_VALUE = TIME_PERIOD_DEFAULT

    def __init__(
        self,
        name: str,
        label: str | None = None,
        is_date_only: bool = False,
        now: datetime | None = None,
        timezone: tzinfo | None = None,
    ):
        super().__init__(name, label)
        self.is_date_only = is_date_only
        self.period = ParsedPeriod()
        self._now = now
        self._timezone = timezone

    @property
    def data_source(self) -> DataSource:
        return get_data_source(self.get_value())

    def set_value(self, value: Any) -> "WidgetField":
        if isinstance(value, dict):
            value = {key: item for key, item in value.items() if key != "data_source"}
        return super().set_value(value)

    def validation_rules(self, strict: bool = False) -> dict:
        return time_period_rules(self.data_source, strict and self.is_not_empty)

    def validate(self, strict: bool = False) -> list[str]:
        self.period = ParsedPeriod()

        try:
            validated = validate_time_period(
                self.get_value(),
                is_date_only=self.is_date_only,
                is_required=strict and self.is_not_empty,
                label=self.display_name,
                now=self._now,
                timezone=self._timezone,
            )
        except WidgetFieldError as e:
            self._reset()
            return e.messages

        self.period = validated.period
        return []

    def to_api(self, widget_fields: list[dict]) -> None:
        value = self.get_value()
        if value == self.default or not isinstance(value, dict):
            return

        if self.data_source == DataSource.DEFAULT:
            widget_fields.extend(
                [
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[from]",
                        "value": value["from"],
                    },
                    {
                        "type": int(WidgetFieldType.STR),
                        "name": f"{self.name}[to]",
                        "value": value["to"],
                    },
                ]
            )
        elif "reference" in value:
            widget_fields.append(
                {
                    "type": int(WidgetFieldType.STR),
                    "name": f"{self.name}[reference]",
                    "value": value["reference"],
                }
            )
