from __future__ import annotations

from typing import Optional

LIGHT_TEXT = "#ffffff"
DARK_TEXT = "#000000"


def text_color_for(background: Optional[str]) -> str:
    """Pick black or white text for a hex background such as ``"1e90ff"``.

    Uses the perceived brightness (299R + 587G + 114B) / 1000; anything below
    128 gets white text. Missing or malformed colours fall back to black.
    """
    color = (background or "").strip().lstrip("#")
    if len(color) < 6:
        return DARK_TEXT
    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except ValueError:
        return DARK_TEXT
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return LIGHT_TEXT if brightness < 128 else DARK_TEXT
