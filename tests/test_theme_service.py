import pytest

from prefsync.app.boot import BootState
from prefsync.app.storage import PreferenceStorage
from prefsync.config import settings
from prefsync.design import DARK_THEME, LIGHT_THEME, ThemeValidationError
from prefsync.services.event_bus import EventBus, PrefEvent
from prefsync.services.theme_service import ThemePreferenceStore, read_identity_mode


@pytest.fixture()
def setup_store(tmp_path):
    bus = EventBus()
    storage = PreferenceStorage(tmp_path)
    os_dark = {"value": False}
    store = ThemePreferenceStore(
        bus,
        storage,
        BootState(is_dark_mode=False, source="os"),
        os_prefers_dark=lambda: os_dark["value"],
    )
    return bus, storage, store, os_dark


def _collect(bus, event):
    received = []
    bus.subscribe(event, lambda evt: received.append(evt.payload))
    return received


def test_boot_palette_applied_synchronously(tmp_path):
    store = ThemePreferenceStore(
        EventBus(), PreferenceStorage(tmp_path), BootState(is_dark_mode=True, source="stored")
    )
    assert store.is_dark_mode is True
    assert store.resolved_theme == dict(DARK_THEME)
    assert store.override == {}


def test_set_dark_mode_emits_theme_and_mode_events(setup_store):
    bus, _, store, _ = setup_store
    themes = _collect(bus, PrefEvent.THEME_CHANGED)
    modes = _collect(bus, PrefEvent.MODE_CHANGED)
    diff = store.set_dark_mode(True)
    assert not diff.no_changes
    assert store.resolved_theme == dict(DARK_THEME)
    assert themes and themes[-1]["count"] >= 1 and themes[-1]["is_dark_mode"] is True
    assert modes == [{"is_dark_mode": True}]


def test_set_dark_mode_with_override(setup_store):
    _, _, store, _ = setup_store
    store.set_dark_mode(True, {"primary": "#FF0000"})
    assert store.resolved_theme["primary"] == "#FF0000"
    assert store.resolved_theme["background"] == DARK_THEME["background"]


def test_apply_theme_keeps_mode(setup_store):
    bus, _, store, _ = setup_store
    modes = _collect(bus, PrefEvent.MODE_CHANGED)
    store.apply_theme(DARK_THEME, {"primary": "#00FF00"})
    assert store.is_dark_mode is False
    assert store.resolved_theme["primary"] == "#00FF00"
    assert modes == []


def test_apply_same_override_twice_is_stable(setup_store):
    bus, _, store, _ = setup_store
    themes = _collect(bus, PrefEvent.THEME_CHANGED)
    store.apply_theme(LIGHT_THEME, {"primary": "#FF0000"})
    first = store.resolved_theme
    diff = store.apply_theme(LIGHT_THEME, {"primary": "#FF0000"})
    assert diff.no_changes
    assert store.resolved_theme == first
    assert len(themes) == 1


def test_no_event_when_nothing_changes(setup_store):
    bus, _, store, _ = setup_store
    themes = _collect(bus, PrefEvent.THEME_CHANGED)
    diff = store.set_dark_mode(False)
    assert diff.no_changes
    assert themes == []


def test_reset_to_default_drops_override(setup_store):
    _, _, store, _ = setup_store
    store.set_dark_mode(True, {"primary": "#FF0000"})
    store.reset_to_default()
    assert store.override == {}
    assert store.resolved_theme == dict(LIGHT_THEME)
    assert store.is_dark_mode is False


def test_reset_to_default_resamples_os_scheme(setup_store):
    _, _, store, os_dark = setup_store
    os_dark["value"] = True
    store.reset_to_default()
    assert store.is_dark_mode is True
    assert store.resolved_theme == dict(DARK_THEME)


def test_reset_to_default_ignores_stored_choice(setup_store):
    _, storage, store, os_dark = setup_store
    storage.set(settings.THEME_MODE_KEY, "dark")
    os_dark["value"] = False
    store.set_dark_mode(True)
    store.reset_to_default()
    assert store.is_dark_mode is False
    # the persisted flag is left for the next boot
    assert storage.get(settings.THEME_MODE_KEY) == "dark"


def test_choose_mode_persists_global_and_identity_keys(setup_store):
    _, storage, store, _ = setup_store
    store.apply_theme(LIGHT_THEME, {"primary": "#ABCDEF"})
    store.choose_mode(True, user_id="u1", tenant_id="t1")
    assert storage.get(settings.THEME_MODE_KEY) == "dark"
    assert read_identity_mode(storage, "u1", "t1") is True
    # Active override survives the mode switch
    assert store.resolved_theme["primary"] == "#ABCDEF"
    assert store.resolved_theme["background"] == DARK_THEME["background"]


def test_read_identity_mode_absent(setup_store):
    _, storage, _, _ = setup_store
    assert read_identity_mode(storage, "nobody", "none") is None


def test_validation_error_on_incomplete_base(setup_store):
    _, _, store, _ = setup_store
    with pytest.raises(ThemeValidationError):
        store.apply_theme({"primary": "#000000"})


def test_snapshot_is_sorted(setup_store):
    _, _, store, _ = setup_store
    store.apply_theme(LIGHT_THEME, {"text": "#111111"})
    snap = store.snapshot()
    keys = [c["key"] for c in snap["colors"]]
    assert keys == sorted(keys)
    assert snap["mode"] == "light"
    assert snap["override_keys"] == ["text"]
    assert snap["missing_required"] == []
