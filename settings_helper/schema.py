"""Declarative model of option groups, settings sections and their fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .logger import logger
from .utils import as_text

FIELD_TYPES = (
    "text",
    "number",
    "email",
    "password",
    "textarea",
    "select",
    "radio",
    "checkbox",
    "checkboxes",
    "hidden",
    "dropdown_pages",
    "callback",
)
CHOICE_TYPES = ("select", "radio", "checkboxes")
# Types that may omit id, title and name.
RELAXED_TYPES = ("hidden", "callback")

Sanitizer = Callable[[Dict[str, Any]], Dict[str, Any]]
FieldCallback = Callable[..., Any]
Choices = Tuple[Tuple[str, str], ...]


class SchemaError(ValueError):
    """Raised when a settings declaration is incomplete or inconsistent."""


class UnknownFieldTypeError(SchemaError):
    """Raised at render time for an unrecognised field type under the ``error`` policy."""


def _normalise_choices(raw: Any) -> Choices:
    """Turn a mapping, a list of pairs or a list of ``{"value", "label"}`` dicts into ordered pairs."""
    if raw is None:
        return ()
    items = raw.items() if isinstance(raw, Mapping) else raw
    choices: List[Tuple[str, str]] = []
    for item in items:
        if isinstance(item, Mapping):
            key = item.get("value")
            label = item.get("label", key)
        else:
            key, label = item
        choices.append((as_text(key), as_text(label)))
    return tuple(choices)


@dataclass(frozen=True)
class SettingField:
    type: str
    id: str = ""
    title: str = ""
    name: str = ""
    choices: Choices = ()
    placeholder: str = ""
    class_name: str = ""
    description: str = ""
    value: Any = ""
    callback: Optional[FieldCallback] = None
    param: Any = None
    label_for: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", _normalise_choices(self.choices))
        if isinstance(self.value, (list, set, frozenset)):
            object.__setattr__(self, "value", tuple(as_text(item) for item in self.value))
        self._validate()

    def _validate(self) -> None:
        label = self.id or self.name or "<unnamed>"
        if not self.type:
            raise SchemaError(f"field '{label}' has no type")
        if self.type not in RELAXED_TYPES:
            missing = [attr for attr in ("id", "title", "name") if not getattr(self, attr)]
            if missing:
                raise SchemaError(f"{self.type} field '{label}' is missing {', '.join(missing)}")
        if self.type in CHOICE_TYPES and not self.choices:
            raise SchemaError(f"{self.type} field '{label}' needs at least one choice")
        if len(set(self.choice_keys)) != len(self.choices):
            # Keys compare as text, so 1 and "1" are the same choice.
            raise SchemaError(f"{self.type} field '{label}' has duplicate choice keys")
        if self.type == "callback" and not callable(self.callback):
            raise SchemaError(f"callback field '{label}' has no callable callback")

    @property
    def choice_keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.choices)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SettingField":
        """Build a field from the loose mapping form (``desc``, ``class`` and friends)."""
        return cls(
            type=as_text(data.get("type")),
            id=as_text(data.get("id")),
            title=as_text(data.get("title")),
            name=as_text(data.get("name")),
            choices=data.get("choices"),
            placeholder=as_text(data.get("placeholder")),
            class_name=as_text(data.get("class", data.get("class_name"))),
            description=as_text(data.get("desc", data.get("description"))),
            value=data.get("value", ""),
            callback=data.get("callback"),
            param=data.get("param"),
            label_for=data.get("label_for"),
        )


@dataclass(frozen=True)
class Section:
    section_id: str
    title: str
    page_slug: str
    option_name: str
    description: str = ""
    fields: Tuple[SettingField, ...] = ()

    def __post_init__(self) -> None:
        missing = [
            attr for attr in ("section_id", "title", "page_slug", "option_name") if not getattr(self, attr)
        ]
        if missing:
            raise SchemaError(f"section '{self.section_id or '<unnamed>'}' is missing {', '.join(missing)}")

        fields: List[SettingField] = []
        for entry in self.fields or ():
            if isinstance(entry, SettingField):
                fields.append(entry)
                continue
            try:
                fields.append(SettingField.from_dict(entry))
            except SchemaError as exc:
                raise SchemaError(f"section '{self.section_id}': {exc}") from exc
        object.__setattr__(self, "fields", tuple(fields))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Section":
        return cls(
            section_id=as_text(data.get("id", data.get("section_id"))),
            title=as_text(data.get("title")),
            page_slug=as_text(data.get("menu_slug", data.get("page_slug"))),
            option_name=as_text(data.get("option_name")),
            description=as_text(data.get("description")),
            fields=tuple(data.get("fields") or ()),
        )


@dataclass(frozen=True)
class OptionGroup:
    group_id: str
    option_name: str
    sanitizer: Optional[Sanitizer] = None
    default: Dict[str, Any] = field(default_factory=dict)
    # Extra registration arguments handed to the host as-is.
    args: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.group_id or not self.option_name:
            raise SchemaError(
                f"option group '{self.group_id or '<unnamed>'}' needs both a group id and an option name"
            )
        if self.sanitizer is not None and not callable(self.sanitizer):
            raise SchemaError(f"option group '{self.group_id}' has a non-callable sanitizer")
        object.__setattr__(self, "default", dict(self.default or {}))
        object.__setattr__(self, "args", dict(self.args or {}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OptionGroup":
        return cls(
            group_id=as_text(data.get("option_group", data.get("group_id"))),
            option_name=as_text(data.get("option_name")),
            sanitizer=data.get("sanitizer"),
            default=data.get("default") or {},
            args=data.get("args") or {},
        )


class SettingsSchema:
    """Validated, read-only collection of option groups and sections."""

    def __init__(self, groups: Iterable[Any] = (), sections: Iterable[Any] = ()) -> None:
        self.groups: Tuple[OptionGroup, ...] = tuple(
            group if isinstance(group, OptionGroup) else OptionGroup.from_dict(group) for group in groups
        )
        self.sections: Tuple[Section, ...] = tuple(
            section if isinstance(section, Section) else Section.from_dict(section) for section in sections
        )
        self._validate()
        logger.info(
            f"SettingsHelper: schema loaded with {len(self.groups)} option group(s), "
            f"{len(self.sections)} section(s), "
            f"{sum(len(section.fields) for section in self.sections)} field(s)"
        )

    def _validate(self) -> None:
        option_names = set()
        for group in self.groups:
            if group.option_name in option_names:
                raise SchemaError(f"option '{group.option_name}' is declared by more than one group")
            option_names.add(group.option_name)

        seen = set()
        for section in self.sections:
            key = (section.page_slug, section.section_id)
            if key in seen:
                raise SchemaError(
                    f"section '{section.section_id}' is declared twice on page '{section.page_slug}'"
                )
            seen.add(key)
            if section.option_name not in option_names:
                raise SchemaError(
                    f"section '{section.section_id}' references undeclared option '{section.option_name}'"
                )

    def group_for(self, option_name: str) -> Optional[OptionGroup]:
        for group in self.groups:
            if group.option_name == option_name:
                return group
        return None

    def find_section(self, section_id: str, page_slug: Optional[str] = None) -> Optional[Section]:
        for section in self.sections:
            if section.section_id != section_id:
                continue
            if page_slug is None or section.page_slug == page_slug:
                return section
        return None

    def sections_for_page(self, page_slug: str) -> Tuple[Section, ...]:
        return tuple(section for section in self.sections if section.page_slug == page_slug)

    def pages(self) -> List[str]:
        slugs: List[str] = []
        for section in self.sections:
            if section.page_slug not in slugs:
                slugs.append(section.page_slug)
        return slugs


__all__ = [
    "CHOICE_TYPES",
    "FIELD_TYPES",
    "OptionGroup",
    "SchemaError",
    "Section",
    "SettingField",
    "SettingsSchema",
    "UnknownFieldTypeError",
]
