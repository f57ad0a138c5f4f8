from settings_helper import OptionGroup, Section, SettingsSchema


def make_schema(*fields, option_name="opts", description="Pick things."):
    """One group ``g1`` storing ``option_name`` with one section ``s1`` on page ``my-plugin``."""
    return SettingsSchema(
        groups=[OptionGroup(group_id="g1", option_name=option_name)],
        sections=[
            Section(
                section_id="s1",
                title="General",
                page_slug="my-plugin",
                option_name=option_name,
                description=description,
                fields=fields,
            )
        ],
    )
