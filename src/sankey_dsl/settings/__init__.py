"""Settings catalog and value validation."""

from sankey_dsl.settings.catalog import SETTINGS, SettingMeta, get_setting, has_setting, setting_group
from sankey_dsl.settings.validators import ValidationContext, to_human, validate

__all__ = [
    "SETTINGS",
    "SettingMeta",
    "ValidationContext",
    "get_setting",
    "has_setting",
    "setting_group",
    "to_human",
    "validate",
]
