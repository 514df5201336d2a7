"""Configuration form of the honeycomb widget."""

from .fields import (
    DATA_TYPE_HOST_IDS,
    FOREIGN_REFERENCE_KEY,
    WidgetField,
    WidgetFieldCheckBox,
    WidgetFieldCheckBoxList,
    WidgetFieldColor,
    WidgetFieldIntegerBox,
    WidgetFieldItemPatternSelect,
    WidgetFieldMultiSelectGroup,
    WidgetFieldMultiSelectHost,
    WidgetFieldRadioButtonList,
    WidgetFieldSelect,
    WidgetFieldTags,
    WidgetFieldTextArea,
    WidgetFieldTextBox,
    WidgetFieldThresholds,
    create_typed_reference,
)
from .form import WidgetForm
from .time_period import REFERENCE_DASHBOARD

TAG_EVAL_TYPE_AND_OR = 0
TAG_EVAL_TYPE_OR = 2

SHOW_PRIMARY = 1
SHOW_SECONDARY = 2

LABEL_TYPE_TEXT = 0
LABEL_TYPE_VALUE = 1

BOLD_ON = 1
UNITS_ON = 1
INTERPOLATION_ON = 1

SIZE_AUTO = 0
SIZE_CUSTOM = 1

SIZE_PERCENT_MIN = 1
SIZE_PERCENT_MAX = 100

PRIMARY_SIZE_DEFAULT = 20
SECONDARY_SIZE_DEFAULT = 30

VALUE_DECIMALS_DEFAULT = 2
VALUE_DECIMALS_MIN = 0
VALUE_DECIMALS_MAX = 6

UNITS_POSITION_BEFORE = 0
UNITS_POSITION_AFTER = 1

EVALTYPE_VALUES = {TAG_EVAL_TYPE_AND_OR: "And/Or", TAG_EVAL_TYPE_OR: "Or"}
LABEL_TYPE_VALUES = {LABEL_TYPE_TEXT: "Text", LABEL_TYPE_VALUE: "Value"}
SIZE_TYPE_VALUES = {SIZE_AUTO: "Auto", SIZE_CUSTOM: "Custom"}
UNITS_POSITION_VALUES = {UNITS_POSITION_BEFORE: "Before value", UNITS_POSITION_AFTER: "After value"}


def dashboard_host_reference() -> dict:
    return {FOREIGN_REFERENCE_KEY: create_typed_reference(REFERENCE_DASHBOARD, DATA_TYPE_HOST_IDS)}


class HoneycombWidgetForm(WidgetForm):
    """
    Honeycomb widget form.

    On template dashboards the hosts always come from the dashboard, so the
    host group and host tag filters are not offered.
    """

    def add_fields(self) -> WidgetForm:
        (
            self.add_field(
                None
                if self.is_template_dashboard
                else WidgetFieldMultiSelectGroup("groupids", "Host groups")
            )
            .add_field(
                WidgetFieldMultiSelectHost("hostids", "Hosts").set_default(
                    dashboard_host_reference() if self.is_template_dashboard else []
                )
            )
            .add_field(
                None
                if self.is_template_dashboard
                else WidgetFieldRadioButtonList(
                    "evaltype_host", "Host tags", EVALTYPE_VALUES
                ).set_default(TAG_EVAL_TYPE_AND_OR)
            )
            .add_field(None if self.is_template_dashboard else WidgetFieldTags("host_tags"))
            .add_field(
                WidgetFieldItemPatternSelect("items", "Item pattern").set_flags(
                    WidgetField.FLAG_NOT_EMPTY | WidgetField.FLAG_LABEL_ASTERISK
                )
            )
            .add_field(
                WidgetFieldRadioButtonList("evaltype_item", "Item tags", EVALTYPE_VALUES).set_default(
                    TAG_EVAL_TYPE_AND_OR
                )
            )
            .add_field(WidgetFieldTags("item_tags"))
            .add_field(
                WidgetFieldCheckBox(
                    "maintenance",
                    "Show data in maintenance"
                    if self.is_template_dashboard
                    else "Show hosts in maintenance",
                ).set_default(0)
            )
            .add_field(
                WidgetFieldCheckBoxList(
                    "show",
                    "Show",
                    {SHOW_PRIMARY: "Primary label", SHOW_SECONDARY: "Secondary label"},
                )
                .set_default([SHOW_PRIMARY, SHOW_SECONDARY])
                .set_flags(WidgetField.FLAG_LABEL_ASTERISK)
            )
        )
        self._add_label_fields("primary", LABEL_TYPE_TEXT, "{HOST.NAME}", PRIMARY_SIZE_DEFAULT, 0)
        self._add_label_fields(
            "secondary",
            LABEL_TYPE_VALUE,
            "{{ITEM.LASTVALUE}.fmtnum(2)}",
            SECONDARY_SIZE_DEFAULT,
            BOLD_ON,
        )

        return (
            self.add_field(WidgetFieldColor("bg_color", "Background color"))
            .add_field(
                WidgetFieldCheckBox("interpolation", "Color interpolation").set_default(
                    INTERPOLATION_ON
                )
            )
            .add_field(WidgetFieldThresholds("thresholds", "Thresholds"))
        )

    def _add_label_fields(
        self, prefix: str, label_type: int, text: str, size: int, bold: int
    ) -> None:
        (
            self.add_field(
                WidgetFieldRadioButtonList(
                    f"{prefix}_label_type", "Type", LABEL_TYPE_VALUES
                ).set_default(label_type)
            )
            .add_field(
                WidgetFieldIntegerBox(
                    f"{prefix}_label_decimal_places",
                    "Decimal places",
                    VALUE_DECIMALS_MIN,
                    VALUE_DECIMALS_MAX,
                )
                .set_default(VALUE_DECIMALS_DEFAULT)
                .set_flags(WidgetField.FLAG_NOT_EMPTY)
            )
            .add_field(
                WidgetFieldTextArea(f"{prefix}_label", "Text")
                .set_default(text)
                .set_flags(WidgetField.FLAG_NOT_EMPTY | WidgetField.FLAG_LABEL_ASTERISK)
            )
            .add_field(
                WidgetFieldRadioButtonList(
                    f"{prefix}_label_size_type", None, SIZE_TYPE_VALUES
                ).set_default(SIZE_AUTO)
            )
            .add_field(
                WidgetFieldIntegerBox(
                    f"{prefix}_label_size", "Size", SIZE_PERCENT_MIN, SIZE_PERCENT_MAX
                ).set_default(size)
            )
            .add_field(WidgetFieldCheckBox(f"{prefix}_label_bold", "Bold").set_default(bold))
            .add_field(WidgetFieldColor(f"{prefix}_label_color", "Color"))
            .add_field(WidgetFieldCheckBox(f"{prefix}_label_units_show").set_default(UNITS_ON))
            .add_field(WidgetFieldTextBox(f"{prefix}_label_units", "Units"))
            .add_field(
                WidgetFieldSelect(
                    f"{prefix}_label_units_pos", "Position", UNITS_POSITION_VALUES
                ).set_default(UNITS_POSITION_AFTER)
            )
        )

    def validate(self, strict: bool = False) -> list[str]:
        if strict and self.is_template_dashboard:
            self.get_field("hostids").set_value(dashboard_host_reference())

        return super().validate(strict)
