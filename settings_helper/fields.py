"""Field renderer: turns a resolved field view into form-control markup."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .config import (
    PAGE_NONE_LABEL,
    PAGE_NONE_VALUE,
    TEXT_INPUT_CLASS,
    TEXTAREA_COLS,
    TEXTAREA_ROWS,
    UNKNOWN_FIELD_POLICIES,
    UNKNOWN_FIELD_POLICY,
)
from .logger import logger
from .schema import SettingField, UnknownFieldTypeError
from .utils import as_text, esc_attr, esc_html, is_empty, stripslashes
from .values import FieldView, ResolvedValue, matches

PageDropdown = Callable[..., Any]


def _join_classes(*names: str) -> str:
    return " ".join(name for name in names if name)


def _description(field: SettingField) -> str:
    if not field.description:
        return ""
    return f'<p class="description">{esc_html(field.description)}</p>'


def _checked(flag: bool) -> str:
    return ' checked="checked"' if flag else ""


def _selected(flag: bool) -> str:
    return ' selected="selected"' if flag else ""


def render_page_dropdown(
    name: str,
    id: str,
    selected: Any = "",
    pages: Iterable[Tuple[Any, Any]] = (),
    show_option_none: str = PAGE_NONE_LABEL,
    option_none_value: str = PAGE_NONE_VALUE,
    class_name: str = "",
) -> str:
    """Render a ``<select>`` over ``(page_id, title)`` pairs with an optional "none" entry."""
    class_attr = f' class="{esc_attr(class_name)}"' if class_name else ""
    parts: List[str] = [f'<select name="{esc_attr(name)}" id="{esc_attr(id)}"{class_attr}>']
    if show_option_none:
        is_none = matches(option_none_value, selected)
        parts.append(
            f'<option value="{esc_attr(option_none_value)}"'
            f"{_selected(is_none)}>{esc_html(show_option_none)}</option>"
        )
    for page_id, title in pages:
        is_selected = matches(page_id, selected)
        parts.append(
            f'<option value="{esc_attr(page_id)}"'
            f"{_selected(is_selected)}>{esc_html(title)}</option>"
        )
    parts.append("</select>")
    return "".join(parts)


def _render_input(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    return (
        f'<input type="{esc_attr(field.type)}" name="{esc_attr(view.input_name)}" id="{esc_attr(field.id)}" '
        f'value="{esc_attr(stripslashes(as_text(view.value)))}" placeholder="{esc_attr(field.placeholder)}" '
        f'class="{esc_attr(_join_classes(TEXT_INPUT_CLASS, field.class_name))}" />'
    ) + _description(field)


def _render_textarea(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    return (
        f'<textarea name="{esc_attr(view.input_name)}" id="{esc_attr(field.id)}" '
        f'placeholder="{esc_attr(field.placeholder)}" rows="{TEXTAREA_ROWS}" cols="{TEXTAREA_COLS}" '
        f'class="{esc_attr(field.class_name)}">{esc_html(stripslashes(as_text(view.value)))}</textarea>'
    ) + _description(field)


def _render_hidden(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    return (
        f'<input type="hidden" name="{esc_attr(view.input_name)}" id="{esc_attr(field.id)}" '
        f'value="{esc_attr(stripslashes(as_text(view.value)))}" />'
    )


def _render_select(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    parts = [
        f'<select name="{esc_attr(view.input_name)}" id="{esc_attr(field.id)}" '
        f'class="{esc_attr(field.class_name)}">'
    ]
    for key, label in field.choices:
        parts.append(f'<option value="{esc_attr(key)}"{_selected(view.is_selected(key))}>{esc_html(label)}</option>')
    parts.append("</select>")
    return "".join(parts) + _description(field)


def _render_radio(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    parts = []
    for key, label in field.choices:
        parts.append(
            f'<label><input type="radio" name="{esc_attr(view.input_name)}" '
            f'id="{esc_attr(field.id)}_{esc_attr(key)}" value="{esc_attr(key)}" '
            f'class="{esc_attr(field.class_name)}"{_checked(view.is_selected(key))} /> '
            f"{esc_html(label)}</label><br />"
        )
    return "".join(parts) + _description(field)


def _render_checkbox(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    return (
        f'<label><input type="checkbox" name="{esc_attr(view.input_name)}" id="{esc_attr(field.id)}" '
        f'value="1" class="{esc_attr(field.class_name)}"{_checked(as_text(view.value) == "1")} /> '
        f"{esc_html(field.description)}</label>"
    )


def _render_checkboxes(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    class_attr = f' class="{esc_attr(field.class_name)}"' if field.class_name else ""
    parts = []
    for key, label in field.choices:
        parts.append(
            f'<label><input type="checkbox" name="{esc_attr(view.input_name)}[]" '
            f'id="{esc_attr(field.id)}_{esc_attr(key)}" value="{esc_attr(key)}"'
            f"{class_attr}{_checked(view.is_selected(key))} /> {esc_html(label)}</label><br />"
        )
    return "".join(parts) + _description(field)


def _render_dropdown_pages(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    markup = page_dropdown(
        name=view.input_name,
        id=field.id,
        selected=view.value or PAGE_NONE_VALUE,
        show_option_none=PAGE_NONE_LABEL,
        option_none_value=PAGE_NONE_VALUE,
    )
    return as_text(markup) + _description(field)


def _render_callback(view: FieldView, page_dropdown: PageDropdown) -> str:
    field = view.field
    if is_empty(field.param):
        result = field.callback(view)
    else:
        result = field.callback(view, field.param)
    return as_text(result)


_RENDERERS: Dict[str, Callable[[FieldView, PageDropdown], str]] = {
    "text": _render_input,
    "number": _render_input,
    "email": _render_input,
    "password": _render_input,
    "textarea": _render_textarea,
    "hidden": _render_hidden,
    "select": _render_select,
    "radio": _render_radio,
    "checkbox": _render_checkbox,
    "checkboxes": _render_checkboxes,
    "dropdown_pages": _render_dropdown_pages,
    "callback": _render_callback,
}


def check_unknown_field_policy(policy: str) -> str:
    if policy not in UNKNOWN_FIELD_POLICIES:
        raise ValueError(f"unknown_field_policy must be one of {UNKNOWN_FIELD_POLICIES}, got {policy!r}")
    return policy


def _render_unknown(view: FieldView, policy: str) -> str:
    field = view.field
    if policy == "error":
        raise UnknownFieldTypeError(f"field '{field.id or field.name}' has unknown type '{field.type}'")
    if policy == "warn":
        logger.warning(
            f"SettingsHelper: field '{field.id or field.name}' has unknown type '{field.type}'; nothing rendered"
        )
    return ""


def render_field(
    view: FieldView,
    *,
    page_dropdown: Optional[PageDropdown] = None,
    unknown_field_policy: str = UNKNOWN_FIELD_POLICY,
) -> str:
    """Render ``view`` to markup, dispatching on the field type."""
    check_unknown_field_policy(unknown_field_policy)
    renderer = _RENDERERS.get(view.field.type)
    if renderer is None:
        return _render_unknown(view, unknown_field_policy)
    return renderer(view, page_dropdown or render_page_dropdown)


def render(
    field: SettingField,
    value: ResolvedValue,
    option_name: str,
    *,
    page_dropdown: Optional[PageDropdown] = None,
    unknown_field_policy: str = UNKNOWN_FIELD_POLICY,
) -> str:
    return render_field(
        FieldView(field=field, option_name=option_name, value=value),
        page_dropdown=page_dropdown,
        unknown_field_policy=unknown_field_policy,
    )


__all__ = ["check_unknown_field_policy", "render", "render_field", "render_page_dropdown"]
