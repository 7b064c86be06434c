# qrforge/core/qr_utils.py
import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError
from PIL import Image

from .config import settings
from .errors import EncodingError, ValidationError
from .log import get_logger

log = get_logger("qr")

ECC_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,  # 7%
    "M": qrcode.constants.ERROR_CORRECT_M,  # 15%
    "Q": qrcode.constants.ERROR_CORRECT_Q,  # 25%
    "H": qrcode.constants.ERROR_CORRECT_H,  # 30%
}

LOGO_ECC = "H"


# -----------------------------------------------------
# 🔹 Error-correction selection
# -----------------------------------------------------
def select_ecc(has_logo: bool, requested: str | None = None) -> str:
    """A logo hides central modules, so it always forces level H."""
    if has_logo:
        return LOGO_ECC
    level = (requested or settings.QR_DEFAULT_ECC).strip().upper()
    if level not in ECC_LEVELS:
        raise ValidationError(f"Invalid error correction level: {requested}")
    return level


# -----------------------------------------------------
# 🔹 Matrix
# -----------------------------------------------------
def _build_qr(text: str, ecc: str, margin: int) -> qrcode.QRCode:
    if ecc not in ECC_LEVELS:
        raise ValidationError(f"Invalid error correction level: {ecc}")
    qr = qrcode.QRCode(
        version=None,
        error_correction=ECC_LEVELS[ecc],
        box_size=1,
        border=margin,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError):
        # newer qrcode releases report overflow as "Invalid version (was 41, ...)"
        raise ValidationError("Data too long to encode")
    except Exception as e:
        raise EncodingError(f"QR encoding failed: {e}") from e
    return qr


def build_matrix(text: str, ecc: str = "M", margin: int = 2) -> list[list[bool]]:
    """Square module grid, quiet zone included."""
    return _build_qr(text, ecc, margin).get_matrix()


# -----------------------------------------------------
# 🔹 Raster rendering
# -----------------------------------------------------
def render_png_image(
    text: str,
    fg: str,
    bg: str,
    ecc: str = "M",
    width: int = 300,
    margin: int = 2,
) -> Image.Image:
    """Render the code as an RGBA image exactly ``width`` pixels square."""
    qr = _build_qr(text, ecc, margin)
    try:
        img = qr.make_image(fill_color=fg, back_color=bg).get_image().convert("RGBA")
    except Exception as e:
        raise EncodingError(f"QR rendering failed: {e}") from e

    # One pixel per module; nearest-neighbour keeps module edges hard.
    img = img.resize((width, width), Image.NEAREST)
    log.info("[QR GENERATED] %r ecc=%s version=%s px=%dx%d", text[:80], ecc, qr.version, width, width)
    return img


# -----------------------------------------------------
# 🔹 Vector rendering
# -----------------------------------------------------
def render_svg(
    text: str,
    fg: str,
    bg: str,
    ecc: str = "M",
    width: int = 300,
    margin: int = 2,
) -> str:
    matrix = build_matrix(text, ecc, margin)
    n = len(matrix)

    path = "".join(
        f"M{x} {y}h1v1h-1z"
        for y, row in enumerate(matrix)
        for x, on in enumerate(row)
        if on
    )
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{width}" '
        f'viewBox="0 0 {n} {n}" shape-rendering="crispEdges">',
        f'<rect x="0" y="0" width="{n}" height="{n}" fill="{bg}"/>',
        f'<path fill="{fg}" d="{path}"/>',
        "</svg>",
    ]
    log.info("[QR GENERATED SVG] %r ecc=%s modules=%d", text[:80], ecc, n)
    return "\n".join(parts)
