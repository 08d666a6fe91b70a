"""Design package.

Contains the base palettes, theme merge/diff logic, color helpers and tenant
branding presets. Pure data and functions; no Qt imports.
"""

from .palettes import COLOR_SLOTS, ROLE_BG_SLOTS, LIGHT_THEME, DARK_THEME, base_palette  # noqa: F401
from .theme_merge import (  # noqa: F401
    ThemeDiff,
    ThemeValidationError,
    clean_override,
    merge_theme,
    diff_themes,
    validate_theme_keys,
)
from .color_mixing import parse_hex, is_bare_hex, color_to_alpha  # noqa: F401
from .theme_presets import BrandingPreset, get_preset, preset_override, available_presets  # noqa: F401
