"""Color helpers for role-tinted backgrounds.

Role background slots are persisted server-side as bare hex (no alpha) and the
opacity is resolved at runtime. These helpers cover that conversion:

    parse_hex(color: str) -> (r, g, b)
    is_bare_hex(color) -> bool
    color_to_alpha(color, alpha) -> str

Notes:
    - The leading ``#`` is optional; only 3 and 6 digit forms count as bare hex.
    - Anything that is not bare hex (``rgba(...)``, ``hsl(...)``, named colors,
      malformed input) is left untouched by ``color_to_alpha`` so values that
      already carry an explicit opacity are never processed twice.
"""

from __future__ import annotations

import re
from typing import Any, Tuple

__all__ = [
    "parse_hex",
    "is_bare_hex",
    "color_to_alpha",
]

RGB = Tuple[int, int, int]

_BARE_HEX = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def is_bare_hex(color: Any) -> bool:
    return isinstance(color, str) and _BARE_HEX.match(color.strip()) is not None


def parse_hex(color: str) -> RGB:
    """Parse a 3 or 6 digit hex color (``#`` optional) into an (r, g, b) tuple.

    Raises ValueError for anything else.
    """
    if not isinstance(color, str):
        raise ValueError("color must be a string")
    m = _BARE_HEX.match(color.strip())
    if m is None:
        raise ValueError(f"not a 3 or 6 digit hex color: {color!r}")
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    return r, g, b


def color_to_alpha(color: Any, alpha: float) -> Any:
    """Return ``rgba(r, g, b, alpha)`` for bare hex input, else the input unchanged."""
    if not is_bare_hex(color):
        return color
    r, g, b = parse_hex(color)
    return f"rgba({r}, {g}, {b}, {alpha})"
