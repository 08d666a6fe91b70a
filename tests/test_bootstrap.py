import pytest

from prefsync import create_engine
from prefsync.app.bootstrap import PreferenceContext
from prefsync.config import settings
from prefsync.design import DARK_THEME
from prefsync.services.backend_client import BackendClient


def test_create_engine_headless(engine):
    assert isinstance(engine, PreferenceContext)
    assert engine.boot.source == "os"
    assert engine.duration_s >= 0
    assert engine.metadata["surface"] == "MemoryStyleSurface"
    assert engine.translator.locale == "es"


def test_stored_mode_wins_over_os(make_engine, tmp_path, os_dark):
    from prefsync.app.storage import PreferenceStorage

    PreferenceStorage(tmp_path).set(settings.THEME_MODE_KEY, "dark")
    os_dark["value"] = False
    ctx = make_engine()
    assert ctx.boot.source == "stored"
    assert ctx.theme.resolved_theme == dict(DARK_THEME)


def test_stored_language_seeds_translator(make_engine, tmp_path):
    from prefsync.app.storage import PreferenceStorage

    PreferenceStorage(tmp_path).set(settings.USER_LANGUAGE_KEY, "en")
    ctx = make_engine()
    assert ctx.translator.locale == "en"
    assert ctx.localization.user_language == "en"


def test_environment_language_seeds_translator(make_engine, monkeypatch):
    monkeypatch.setenv("LANG", "en_US.UTF-8")
    assert make_engine().translator.locale == "en"


def test_env_color_scheme(tmp_path, monkeypatch, backend):
    monkeypatch.setenv("PREFSYNC_COLOR_SCHEME", "dark")
    ctx = create_engine(data_dir=tmp_path, client=backend)
    assert ctx.theme.is_dark_mode is True


@pytest.mark.asyncio
async def test_default_client_and_aclose(tmp_path):
    ctx = create_engine(data_dir=tmp_path, os_prefers_dark=lambda: False)
    assert isinstance(ctx.client, BackendClient)
    await ctx.aclose()
