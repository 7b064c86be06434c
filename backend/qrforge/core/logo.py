"""Logo overlay: fit an uploaded image onto a backing plate and centre it on the QR raster.

The plate is filled with the QR background colour so the logo's soft or
transparent edges never blend into dark modules.
"""

from io import BytesIO

from PIL import Image, ImageOps

from .colors import hex_to_rgb
from .errors import EncodingError, ValidationError
from .log import get_logger

log = get_logger("logo")

# 70px logo on a 300px code
LOGO_RATIO = 70 / 300
# 8px plate border per side on a 300px code
PLATE_PADDING_RATIO = 8 / 300


def ensure_image_mime(content_type: str | None):
    if not (content_type or "").lower().startswith("image/"):
        raise ValidationError("Logo must be an image")


def load_logo(content: bytes) -> Image.Image:
    """Decode uploaded bytes into an RGBA image."""
    if not content:
        raise ValidationError("Logo file is empty")
    try:
        with Image.open(BytesIO(content)) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise EncodingError(f"Could not read logo image: {e}") from e


def fit_logo(logo: Image.Image, size: int) -> Image.Image:
    """Fit within ``size``×``size`` keeping aspect ratio, padded with transparency."""
    contained = ImageOps.contain(logo.convert("RGBA"), (size, size), Image.LANCZOS)
    canvas = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    offset = ((size - contained.width) // 2, (size - contained.height) // 2)
    canvas.alpha_composite(contained, offset)
    return canvas


def backing_plate(size: int, color: str) -> Image.Image:
    return Image.new("RGBA", (size, size), hex_to_rgb(color) + (255,))


def logo_size_for(qr_width: int) -> int:
    return max(1, round(qr_width * LOGO_RATIO))


def plate_padding_for(qr_width: int) -> int:
    return max(1, round(qr_width * PLATE_PADDING_RATIO))


def overlay_logo(
    qr_image: Image.Image,
    logo_bytes: bytes,
    content_type: str | None,
    background: str,
) -> Image.Image:
    """Return a new image with the logo centred on ``qr_image``.

    ``qr_image`` is left untouched and the result has its exact dimensions.
    """
    ensure_image_mime(content_type)
    logo = load_logo(logo_bytes)

    # convert() always returns a new image
    base = qr_image.convert("RGBA")
    width, height = base.size

    side = min(width, height)
    logo_side = logo_size_for(side)
    plate_side = min(logo_side + 2 * plate_padding_for(side), width, height)
    logo_side = min(logo_side, plate_side)

    fitted = fit_logo(logo, logo_side)
    plate = backing_plate(plate_side, background)
    plate.alpha_composite(
        fitted, ((plate_side - logo_side) // 2, (plate_side - logo_side) // 2)
    )

    base.alpha_composite(plate, ((width - plate_side) // 2, (height - plate_side) // 2))
    log.info(
        "[LOGO OVERLAY] source=%dx%d logo=%dpx plate=%dpx qr=%dx%d",
        logo.width, logo.height, logo_side, plate_side, width, height,
    )
    return base
