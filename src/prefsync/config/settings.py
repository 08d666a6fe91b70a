"""Global configuration and constants for preference resolution."""

from __future__ import annotations

import os
from typing import Final

API_BASE_URL: Final = os.environ.get("PREFSYNC_API_BASE_URL", "http://localhost:5200/api")
API_VERSION: Final = os.environ.get("PREFSYNC_API_VERSION", "v1")
HTTP_TIMEOUT: Final = float(os.environ.get("PREFSYNC_HTTP_TIMEOUT", "30"))  # seconds
HTTP_RETRIES: Final = int(os.environ.get("PREFSYNC_HTTP_RETRIES", "2"))  # GETs only
DATA_DIR: Final = os.environ.get("PREFSYNC_DATA_DIR", "data")

# Storage keys
THEME_MODE_KEY: Final = "theme-mode"
USER_LANGUAGE_KEY: Final = "user-language"
IDENTITY_MODE_KEY_TEMPLATE: Final = "mode:{user_id}:{tenant_id}"
STORAGE_FILENAME: Final = "preferences_state.json"

# Locale policy
SUPPORTED_LANGUAGES: Final = ("es", "en")
DEFAULT_LANGUAGE: Final = "es"

# Fallbacks used by derived localization accessors before the backend answers
DEFAULT_TIME_ZONE: Final = "UTC"
DEFAULT_CULTURE: Final = "es-AR"

# Opacity applied to role background slots stored as bare hex
ROLE_BG_ALPHA: Final = 0.12


def identity_mode_key(user_id: str, tenant_id: str) -> str:
    return IDENTITY_MODE_KEY_TEMPLATE.format(user_id=user_id, tenant_id=tenant_id)


def build_api_url(path: str, *, base_url: str | None = None, version: str | None = None) -> str:
    """Join API base, version and a relative endpoint path."""
    clean = path[1:] if path.startswith("/") else path
    base = (base_url or API_BASE_URL).rstrip("/")
    return f"{base}/{version or API_VERSION}/{clean}"
