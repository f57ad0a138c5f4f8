import pytest

from settings_helper import MemoryOptionStore, SettingField, SettingsHost, SettingsManager

from utilities import make_schema


@pytest.fixture
def store():
    return MemoryOptionStore()


@pytest.fixture
def host(store):
    return SettingsHost(store, pages=[(2, "About"), (7, "Contact")], nonce_factory=lambda action: "n0nce")


@pytest.fixture
def make_manager(store, host):
    def _make(*fields, description="Pick things.", **kwargs):
        manager = SettingsManager(make_schema(*fields, description=description), store, host, **kwargs)
        manager.on_init()
        return manager

    return _make


@pytest.fixture
def color_field():
    return SettingField(type="text", id="f1", title="Color", name="color")
