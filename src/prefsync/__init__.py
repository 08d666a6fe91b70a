"""prefsync public API.

Small, stable surface for callers that embed the engine:

- `create_engine` / `PreferenceContext` (bootstrap)
- `merge_theme` / `color_to_alpha` (pure theme helpers)
- `resolve_locale` (locale precedence)

Deeper modules stay importable by path (e.g. `prefsync.services.theme_service`).
"""

from .app.bootstrap import PreferenceContext, create_engine  # noqa: F401
from .design import color_to_alpha, merge_theme  # noqa: F401
from .i18n import resolve_locale  # noqa: F401

__all__ = [
    "PreferenceContext",
    "create_engine",
    "color_to_alpha",
    "merge_theme",
    "resolve_locale",
]

__version__ = "0.1.0"
