"""Settings manager: registers the schema with the host and renders it on request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from jinja2 import Environment
from markupsafe import Markup

from .config import FORM_ACTION_URL, SUBMIT_LABEL, UNKNOWN_FIELD_POLICY
from .fields import check_unknown_field_policy, render_field
from .host import SettingsHost
from .logger import logger
from .schema import OptionGroup, Sanitizer, SettingField, SettingsSchema
from .store import OptionStore
from .utils import esc_html
from .values import resolve_with_defaults

_FORM_TEMPLATE = Environment(autoescape=True).from_string(
    '<form action="{{ action }}" method="post">{{ hidden_fields }}{{ sections }}{{ submit }}</form>'
)


@dataclass(frozen=True)
class FieldContext:
    """What the host hands back to ``render_field`` for one registered field."""

    field: SettingField
    option_name: str
    section_id: str
    page_slug: str


class SettingsManager:
    """Owns one schema and exposes the callbacks the host invokes.

    Rendering is stateless: every ``render_field`` call reads the option
    bundle from the store again.
    """

    def __init__(
        self,
        schema: SettingsSchema,
        store: OptionStore,
        host: Optional[SettingsHost] = None,
        *,
        unknown_field_policy: str = UNKNOWN_FIELD_POLICY,
        form_action: str = FORM_ACTION_URL,
        submit_label: str = SUBMIT_LABEL,
    ) -> None:
        check_unknown_field_policy(unknown_field_policy)
        self.schema = schema
        self.store = store
        self.host = host if host is not None else SettingsHost(store)
        self.unknown_field_policy = unknown_field_policy
        self.form_action = form_action
        self.submit_label = submit_label

    def on_init(self) -> None:
        """Register option groups, sections and fields with the host."""
        for group in self.schema.groups:
            args = dict(group.args)
            if not callable(args.get("sanitize_callback")):
                args["sanitize_callback"] = self.sanitizer_for(group)
            self.host.register_setting(group.group_id, group.option_name, args)

        field_count = 0
        for section in self.schema.sections:
            self.host.add_settings_section(
                section.section_id, section.title, self.render_section_description, section.page_slug
            )
            for field in section.fields:
                extra: Dict[str, Any] = {
                    "field": FieldContext(
                        field=field,
                        option_name=section.option_name,
                        section_id=section.section_id,
                        page_slug=section.page_slug,
                    )
                }
                if field.label_for:
                    extra["label_for"] = field.label_for
                self.host.add_settings_field(
                    field.id, field.title, self.render_field, section.page_slug, section.section_id, extra
                )
                field_count += 1

        logger.info(
            f"SettingsHelper: registered {len(self.schema.groups)} option group(s), "
            f"{len(self.schema.sections)} section(s) and {field_count} field(s)"
        )

    def sanitizer_for(self, group: OptionGroup) -> Sanitizer:
        return group.sanitizer if group.sanitizer is not None else self.sanitize

    def sanitize(self, bundle: Dict[str, Any]) -> Dict[str, Any]:
        """Default sanitizer; returns the submitted bundle unchanged."""
        return bundle

    def current_bundle(self, option_name: str) -> Dict[str, Any]:
        """Stored bundle for ``option_name`` with the group's defaults filled in."""
        group = self.schema.group_for(option_name)
        defaults = dict(group.default) if group is not None else {}
        stored = self.store.get(option_name)
        if not isinstance(stored, Mapping):
            return defaults
        # Keys the schema no longer knows about are kept.
        return {**defaults, **stored}

    def render_section_description(self, args: Union[Mapping[str, Any], str]) -> str:
        if isinstance(args, Mapping):
            section = self.schema.find_section(str(args.get("id", "")), args.get("page"))
        else:
            section = self.schema.find_section(args)
        if section is None or not section.description:
            return ""
        return f"<p>{esc_html(section.description)}</p>"

    def render_field(self, context: Union[FieldContext, Mapping[str, Any]]) -> str:
        if isinstance(context, Mapping):
            context = context["field"]
        view = resolve_with_defaults(context.field, self.current_bundle(context.option_name), context.option_name)
        return render_field(
            view,
            page_dropdown=getattr(self.host, "dropdown_pages", None),
            unknown_field_policy=self.unknown_field_policy,
        )

    def render_settings_page(self, page_slug: str) -> str:
        """Render the complete ``<form>`` for every section registered on ``page_slug``."""
        if not page_slug:
            return ""
        sections = self.schema.sections_for_page(page_slug)
        group = self.schema.group_for(sections[0].option_name) if sections else None
        option_page = group.group_id if group is not None else page_slug
        return _FORM_TEMPLATE.render(
            action=self.form_action,
            hidden_fields=Markup(self.host.settings_fields(option_page)),
            sections=Markup(self.host.do_settings_sections(page_slug)),
            submit=Markup(self.host.submit_button(self.submit_label)),
        )


__all__ = ["FieldContext", "SettingsManager"]
