"""Request pipeline: normalize → validate colours → encode → overlay logo → export."""

from dataclasses import dataclass
from typing import Optional

from PIL import Image

from ..utils import export
from .colors import validate_colors
from .config import settings
from .errors import ValidationError
from .logo import ensure_image_mime, overlay_logo
from .normalize import normalize_payload
from .qr_utils import render_png_image, render_svg, select_ecc

CONTRAST_ERROR = "Colors do not have enough contrast to be scannable"


@dataclass(frozen=True)
class LogoUpload:
    content: bytes
    content_type: str


@dataclass(frozen=True)
class GenerationRequest:
    raw_text: str
    normalized_text: str
    foreground: str
    background: str
    logo: Optional[LogoUpload]
    ecc: str
    margin: int
    width: int


def prepare_request(
    data: Optional[str],
    fg: Optional[str] = None,
    bg: Optional[str] = None,
    logo: Optional[LogoUpload] = None,
    strict: bool = True,
) -> GenerationRequest:
    """Validate raw form input.

    ``strict`` turns a failed contrast check into a ValidationError; the
    lenient path (downloads) only falls back to default colours.
    """
    raw = (data or "").strip()
    if not raw:
        raise ValidationError("Data is required")

    colors = validate_colors(fg, bg)
    if strict and not colors.acceptable:
        raise ValidationError(CONTRAST_ERROR)

    if logo is not None:
        ensure_image_mime(logo.content_type)

    return GenerationRequest(
        raw_text=raw,
        normalized_text=normalize_payload(raw),
        foreground=colors.foreground,
        background=colors.background,
        logo=logo,
        ecc=select_ecc(has_logo=logo is not None),
        margin=settings.QR_MARGIN,
        width=settings.QR_WIDTH,
    )


def render_raster(req: GenerationRequest) -> Image.Image:
    img = render_png_image(
        req.normalized_text, req.foreground, req.background,
        ecc=req.ecc, width=req.width, margin=req.margin,
    )
    if req.logo is not None:
        img = overlay_logo(img, req.logo.content, req.logo.content_type, req.background)
    return img


def render_export(req: GenerationRequest, fmt: str) -> export.ExportResult:
    fmt = export.parse_format(fmt)
    if fmt == "svg":
        # Vector output never carries the raster logo, so it also keeps the no-logo ECC.
        markup = render_svg(
            req.normalized_text, req.foreground, req.background,
            ecc=select_ecc(has_logo=False), width=req.width, margin=req.margin,
        )
        return export.export_svg(markup)

    img = render_raster(req)
    if fmt == "pdf":
        return export.export_pdf(img)
    return export.export_png(img)
