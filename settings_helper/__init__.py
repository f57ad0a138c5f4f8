"""Schema-driven settings forms: declare options and sections, render them bound to stored values."""

from .fields import render, render_field, render_page_dropdown
from .host import SettingsHost
from .manager import FieldContext, SettingsManager
from .schema import (
    CHOICE_TYPES,
    FIELD_TYPES,
    OptionGroup,
    SchemaError,
    Section,
    SettingField,
    SettingsSchema,
    UnknownFieldTypeError,
)
from .store import JsonFileOptionStore, MemoryOptionStore, OptionStore
from .values import FieldView, resolve, resolve_with_defaults

__all__ = [
    "CHOICE_TYPES",
    "FIELD_TYPES",
    "FieldContext",
    "FieldView",
    "JsonFileOptionStore",
    "MemoryOptionStore",
    "OptionGroup",
    "OptionStore",
    "SchemaError",
    "Section",
    "SettingField",
    "SettingsHost",
    "SettingsManager",
    "SettingsSchema",
    "UnknownFieldTypeError",
    "render",
    "render_field",
    "render_page_dropdown",
    "resolve",
    "resolve_with_defaults",
]
