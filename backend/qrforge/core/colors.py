# qrforge/core/colors.py
import math
import re
from typing import NamedTuple, Optional, Tuple

from .config import settings

RGB = Tuple[int, int, int]

DEFAULT_FG = "#000000"
DEFAULT_BG = "#ffffff"

# Empirical scan-safety thresholds
MIN_LUMINANCE_DELTA = settings.QR_MIN_LUMINANCE_DELTA
MIN_RGB_DISTANCE = settings.QR_MIN_RGB_DISTANCE

HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class ColorCheck(NamedTuple):
    foreground: str
    background: str
    acceptable: bool


# -----------------------------------------------------
# 🔹 Parsing
# -----------------------------------------------------
def is_valid_hex(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(HEX_RE.match(value.strip()))


def hex_to_rgb(value: str) -> RGB:
    h = value.strip().lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def sanitize(value: Optional[str], default: str) -> str:
    """Return the trimmed colour, or ``default`` when it is not ``#RRGGBB``."""
    if is_valid_hex(value):
        return value.strip()
    return default


# -----------------------------------------------------
# 🔹 Contrast heuristic
# -----------------------------------------------------
def luminance(rgb: RGB) -> float:
    r, g, b = rgb
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def rgb_distance(a: RGB, b: RGB) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def contrast_ok(
    fg: str,
    bg: str,
    min_luminance_delta: float = MIN_LUMINANCE_DELTA,
    min_distance: float = MIN_RGB_DISTANCE,
) -> bool:
    """Both colours must already be valid ``#RRGGBB`` strings."""
    if fg.strip().lower() == bg.strip().lower():
        return False

    fg_rgb, bg_rgb = hex_to_rgb(fg), hex_to_rgb(bg)
    if abs(luminance(fg_rgb) - luminance(bg_rgb)) < min_luminance_delta:
        return False
    if rgb_distance(fg_rgb, bg_rgb) < min_distance:
        return False
    return True


def validate_colors(fg: Optional[str], bg: Optional[str]) -> ColorCheck:
    """Substitute defaults for invalid input and score the resulting pair.

    Never raises: whether a low-contrast pair is fatal is up to the caller.
    """
    foreground = sanitize(fg, DEFAULT_FG)
    background = sanitize(bg, DEFAULT_BG)
    return ColorCheck(foreground, background, contrast_ok(foreground, background))
