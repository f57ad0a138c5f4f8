"""Resolution of stored option values into the values a field displays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from .schema import SettingField
from .utils import as_text, is_empty, is_truthy

ResolvedValue = Union[str, int, Tuple[str, ...]]

_SET_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class FieldView:
    """A field together with its option name and resolved value, ready to render."""

    field: SettingField
    option_name: str
    value: Any

    @property
    def input_name(self) -> str:
        return f"{self.option_name}[{self.field.name}]"

    def is_selected(self, choice_key: Any) -> bool:
        """Selection test for select, radio and checkboxes fields."""
        if self.field.type == "checkboxes":
            return as_text(choice_key) in self.value
        return matches(choice_key, self.value)


def matches(choice_key: Any, value: Any) -> bool:
    """Loose equality: both sides compare as text, so ``1`` matches ``"1"``."""
    return as_text(choice_key) == as_text(value)


def _stored(field: SettingField, bundle: Optional[Mapping[str, Any]]) -> Any:
    if not isinstance(bundle, Mapping):
        return None
    return bundle.get(field.name)


def resolve(field: SettingField, bundle: Optional[Mapping[str, Any]]) -> ResolvedValue:
    """Compute the display value of ``field`` from the stored option bundle."""
    stored = _stored(field, bundle)

    if field.type == "checkbox":
        candidate = field.value if is_empty(stored) else stored
        return 1 if is_truthy(candidate) else 0

    if field.type == "checkboxes":
        if stored is None:
            stored = field.value
        if not isinstance(stored, _SET_TYPES):
            return ()
        return tuple(as_text(item) for item in stored)

    candidate = field.value if is_empty(stored) else stored
    if isinstance(candidate, _SET_TYPES + (dict,)):
        # A collection stored under a scalar field has no text form.
        return ""
    return as_text(candidate)


def resolve_with_defaults(
    field: SettingField, bundle: Optional[Mapping[str, Any]], option_name: str
) -> FieldView:
    return FieldView(field=field, option_name=option_name, value=resolve(field, bundle))


__all__ = ["FieldView", "ResolvedValue", "matches", "resolve", "resolve_with_defaults"]
