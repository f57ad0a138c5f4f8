import pytest

from settings_helper import (
    FieldContext,
    MemoryOptionStore,
    OptionGroup,
    Section,
    SettingField,
    SettingsHost,
    SettingsManager,
    SettingsSchema,
)

from utilities import make_schema


def _context(manager):
    section = manager.schema.sections[0]
    return FieldContext(
        field=section.fields[0], option_name="opts", section_id=section.section_id, page_slug=section.page_slug
    )


def test_text_field_end_to_end(make_manager, store, host, color_field):
    store.set("opts", {"color": "blue"})
    make_manager(color_field)

    html = host.do_settings_sections("my-plugin")
    assert "<h2>General</h2><p>Pick things.</p>" in html
    assert '<input type="text" name="opts[color]" id="f1" value="blue"' in html


def test_checkboxes_end_to_end(make_manager, store, host):
    store.set("opts", {"color": ["blue"]})
    make_manager(
        SettingField(type="checkboxes", id="f1", title="Color", name="color", choices={"red": "Red", "blue": "Blue"})
    )

    html = host.do_settings_sections("my-plugin")
    assert '<input type="checkbox" name="opts[color][]" id="f1_red" value="red" /> Red' in html
    assert '<input type="checkbox" name="opts[color][]" id="f1_blue" value="blue" checked="checked" /> Blue' in html


def test_render_reads_store_every_time(make_manager, store, color_field):
    manager = make_manager(color_field)
    context = {"field": _context(manager)}
    assert 'value=""' in manager.render_field(context)
    store.set("opts", {"color": "green"})
    assert 'value="green"' in manager.render_field(context)


def test_render_field_accepts_context_object(make_manager, store, color_field):
    store.set("opts", {"color": "teal"})
    manager = make_manager(color_field)
    assert 'value="teal"' in manager.render_field(_context(manager))


def test_section_description(make_manager):
    manager = make_manager(description="Use <b>care</b>")
    assert manager.render_section_description({"id": "s1"}) == "<p>Use &lt;b&gt;care&lt;/b&gt;</p>"
    assert manager.render_section_description("s1") == "<p>Use &lt;b&gt;care&lt;/b&gt;</p>"
    assert manager.render_section_description({"id": "missing"}) == ""


def test_group_defaults_fill_missing_keys(store, host):
    schema = SettingsSchema(
        groups=[OptionGroup(group_id="g1", option_name="opts", default={"color": "red", "size": "m"})],
        sections=[
            Section(
                section_id="s1",
                title="General",
                page_slug="p",
                option_name="opts",
                fields=[SettingField(type="text", id="f1", title="Color", name="color")],
            )
        ],
    )
    manager = SettingsManager(schema, store, host)
    assert manager.current_bundle("opts") == {"color": "red", "size": "m"}
    store.set("opts", {"color": "blue", "extra": 1})
    assert manager.current_bundle("opts") == {"color": "blue", "size": "m", "extra": 1}


def test_on_init_registers_default_sanitizer(make_manager, host, store, color_field):
    make_manager(color_field)
    setting = host.registered_settings("g1")[0]
    assert setting.option_name == "opts"
    assert setting.sanitize_callback({"color": "x"}) == {"color": "x"}

    host.submit("g1", {"opts": {"color": "purple"}})
    assert 'value="purple"' in host.do_settings_sections("my-plugin")


def test_group_sanitizer_and_args(store, host):
    def upper(bundle):
        return {key: str(value).upper() for key, value in bundle.items()}

    def strip(bundle):
        return {key: str(value).strip() for key, value in bundle.items()}

    schema = SettingsSchema(
        groups=[
            OptionGroup(group_id="g1", option_name="a", sanitizer=upper),
            OptionGroup(group_id="g2", option_name="b", sanitizer=upper, args={"sanitize_callback": strip}),
        ]
    )
    SettingsManager(schema, store, host).on_init()
    host.submit("g1", {"a": {"x": "hi"}})
    host.submit("g2", {"b": {"x": " hi "}})
    assert store.get("a") == {"x": "HI"}
    assert store.get("b") == {"x": "hi"}


def test_subclass_can_override_sanitize(store, host, color_field):
    class Trimming(SettingsManager):
        def sanitize(self, bundle):
            return {key: value.strip() for key, value in bundle.items()}

    Trimming(make_schema(color_field), store, host).on_init()
    host.submit("g1", {"opts": {"color": "  blue "}})
    assert store.get("opts") == {"color": "blue"}


def test_label_for_reaches_host(make_manager, host):
    make_manager(SettingField(type="text", id="f1", title="Color", name="color", label_for="f1"))
    assert '<th scope="row"><label for="f1">Color</label></th>' in host.do_settings_sections("my-plugin")


def test_dropdown_pages_uses_host_pages(make_manager, store, host):
    store.set("opts", {"page": "7"})
    make_manager(SettingField(type="dropdown_pages", id="f1", title="Page", name="page"))
    html = host.do_settings_sections("my-plugin")
    assert '<option value="7" selected="selected">Contact</option>' in html
    assert '<option value="-1">Choose a page</option>' in html


def test_render_settings_page(make_manager, store, host, color_field):
    store.set("opts", {"color": "blue"})
    manager = make_manager(color_field, form_action="/wp-admin/options.php?a=1&b=2")
    html = manager.render_settings_page("my-plugin")
    assert html.startswith('<form action="/wp-admin/options.php?a=1&amp;b=2" method="post">')
    assert '<input type="hidden" name="option_page" value="g1" />' in html
    assert 'value="blue"' in html
    assert 'value="Save Changes" /></p></form>' in html
    assert html.index("option_page") < html.index("opts[color]") < html.index('type="submit"')


def test_render_settings_page_without_slug(make_manager, color_field):
    assert make_manager(color_field).render_settings_page("") == ""


def test_unknown_field_policy_validation(store, color_field):
    with pytest.raises(ValueError):
        SettingsManager(make_schema(color_field), store, unknown_field_policy="loud")


def test_unknown_field_type_is_skipped(make_manager, host):
    make_manager(
        SettingField(type="slider", id="f1", title="Volume", name="volume"),
        unknown_field_policy="ignore",
    )
    assert '<td></td>' in host.do_settings_sections("my-plugin")


def test_default_host_is_created():
    store = MemoryOptionStore()
    manager = SettingsManager(SettingsSchema(), store)
    assert isinstance(manager.host, SettingsHost)
    assert manager.host.store is store


def test_section_title_and_description_are_escaped(store, host, color_field):
    schema = SettingsSchema(
        groups=[OptionGroup(group_id="g1", option_name="opts")],
        sections=[
            Section(
                section_id="s1",
                title='Tom & "Jerry" <3',
                page_slug="my-plugin",
                option_name="opts",
                description='<script>x="1"</script> & co',
                fields=[color_field],
            )
        ],
    )
    SettingsManager(schema, store, host).on_init()
    html = host.do_settings_sections("my-plugin")
    assert "<h2>Tom &amp; &#34;Jerry&#34; &lt;3</h2>" in html
    assert "<p>&lt;script&gt;x=&#34;1&#34;&lt;/script&gt; &amp; co</p>" in html
    assert "<script>" not in html
