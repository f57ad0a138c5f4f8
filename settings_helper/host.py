"""In-process settings host.

This is the page/hook mechanism the settings manager registers with: it keeps
registered settings, sections and fields per page, renders them on demand,
emits the hidden form inputs and submit control, and runs the save path
(sanitize, then write the whole bundle to the option store).
Applications embedding the helper in another framework can replace it with
anything exposing the same methods.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import NONCE_FIELD_NAME, SUBMIT_LABEL
from .fields import render_page_dropdown
from .logger import logger
from .store import OptionStore
from .utils import as_text, esc_attr, esc_html

ChangeHook = Callable[[Any, Any], None]


@dataclass
class RegisteredSetting:
    group_id: str
    option_name: str
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def sanitize_callback(self) -> Optional[Callable[[Any], Any]]:
        callback = self.args.get("sanitize_callback")
        return callback if callable(callback) else None


@dataclass
class RegisteredSection:
    section_id: str
    title: str
    callback: Optional[Callable[[Dict[str, Any]], Any]]
    page_slug: str


@dataclass
class RegisteredField:
    field_id: str
    title: str
    callback: Callable[[Dict[str, Any]], Any]
    page_slug: str
    section_id: str
    args: Dict[str, Any] = field(default_factory=dict)


class SettingsHost:
    def __init__(
        self,
        store: OptionStore,
        pages: Iterable[Tuple[Any, Any]] = (),
        nonce_factory: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.store = store
        self.pages = list(pages)
        self._nonce_factory = nonce_factory or (lambda action: secrets.token_hex(10))
        self._settings: Dict[str, List[RegisteredSetting]] = {}
        self._sections: Dict[str, Dict[str, RegisteredSection]] = {}
        self._fields: Dict[Tuple[str, str], List[RegisteredField]] = {}
        self._change_hooks: Dict[str, List[ChangeHook]] = {}

    # Registration

    def register_setting(self, group_id: str, option_name: str, args: Optional[Dict[str, Any]] = None) -> None:
        settings = self._settings.setdefault(group_id, [])
        settings[:] = [setting for setting in settings if setting.option_name != option_name]
        settings.append(RegisteredSetting(group_id=group_id, option_name=option_name, args=dict(args or {})))
        logger.debug(f"SettingsHelper: registered option '{option_name}' in group '{group_id}'")

    def add_settings_section(
        self,
        section_id: str,
        title: str,
        callback: Optional[Callable[[Dict[str, Any]], Any]],
        page_slug: str,
    ) -> None:
        self._sections.setdefault(page_slug, {})[section_id] = RegisteredSection(
            section_id=section_id, title=title, callback=callback, page_slug=page_slug
        )
        logger.debug(f"SettingsHelper: registered section '{section_id}' on page '{page_slug}'")

    def add_settings_field(
        self,
        field_id: str,
        title: str,
        callback: Callable[[Dict[str, Any]], Any],
        page_slug: str,
        section_id: str = "default",
        args: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._fields.setdefault((page_slug, section_id), []).append(
            RegisteredField(
                field_id=field_id,
                title=title,
                callback=callback,
                page_slug=page_slug,
                section_id=section_id,
                args=dict(args or {}),
            )
        )

    def register_change_hook(self, option_name: str, callback: ChangeHook) -> None:
        """Register a callback invoked with ``(previous, current)`` after an option changes."""
        self._change_hooks.setdefault(option_name, []).append(callback)

    def registered_settings(self, group_id: str) -> List[RegisteredSetting]:
        return list(self._settings.get(group_id, []))

    # Rendering

    def settings_fields(self, group_id: str) -> str:
        """Hidden inputs identifying the option group, the action and the request nonce."""
        nonce = self._nonce_factory(f"{group_id}-options")
        return (
            f'<input type="hidden" name="option_page" value="{esc_attr(group_id)}" />'
            '<input type="hidden" name="action" value="update" />'
            f'<input type="hidden" id="{NONCE_FIELD_NAME}" name="{NONCE_FIELD_NAME}" value="{esc_attr(nonce)}" />'
        )

    def do_settings_sections(self, page_slug: str) -> str:
        parts: List[str] = []
        for section in self._sections.get(page_slug, {}).values():
            if section.title:
                parts.append(f"<h2>{esc_html(section.title)}</h2>")
            if section.callback is not None:
                parts.append(
                    as_text(section.callback({"id": section.section_id, "title": section.title, "page": page_slug}))
                )
            fields = self._fields.get((page_slug, section.section_id))
            if not fields:
                continue
            parts.append('<table class="form-table" role="presentation">')
            parts.extend(self._field_row(registered) for registered in fields)
            parts.append("</table>")
        return "".join(parts)

    def _field_row(self, registered: RegisteredField) -> str:
        title = esc_html(registered.title)
        label_for = registered.args.get("label_for")
        if label_for:
            title = f'<label for="{esc_attr(label_for)}">{title}</label>'
        return f'<tr><th scope="row">{title}</th><td>{as_text(registered.callback(registered.args))}</td></tr>'

    def submit_button(self, label: str = SUBMIT_LABEL) -> str:
        return (
            '<p class="submit"><input type="submit" name="submit" id="submit" '
            f'class="button button-primary" value="{esc_attr(label)}" /></p>'
        )

    def dropdown_pages(self, **kwargs: Any) -> str:
        return render_page_dropdown(pages=self.pages, **kwargs)

    # Saving

    def submit(self, option_page: str, form_data: Mapping[str, Any]) -> Dict[str, Any]:
        """Save every option registered under ``option_page`` from submitted form data.

        Each bundle runs through its sanitize callback before being written whole.
        Returns the saved bundles keyed by option name.
        """
        settings = self._settings.get(option_page)
        if not settings:
            raise LookupError(f"option page '{option_page}' has no registered settings")

        saved: Dict[str, Any] = {}
        for setting in settings:
            bundle = form_data.get(setting.option_name)
            if bundle is None:
                bundle = {}
            sanitize = setting.sanitize_callback
            if sanitize is not None:
                bundle = sanitize(bundle)

            previous = self.store.get(setting.option_name)
            self.store.set(setting.option_name, bundle)
            saved[setting.option_name] = bundle
            logger.info(f"SettingsHelper: saved option '{setting.option_name}' from page '{option_page}'")

            if previous == bundle:
                continue
            for callback in self._change_hooks.get(setting.option_name, []):
                try:
                    callback(previous, bundle)
                except Exception as exc:
                    logger.warning(f"SettingsHelper: change hook failed for '{setting.option_name}': {exc}")
        return saved


__all__ = ["RegisteredField", "RegisteredSection", "RegisteredSetting", "SettingsHost"]
