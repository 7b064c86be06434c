from io import BytesIO
from typing import NamedTuple

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..core.errors import EncodingError, ValidationError
from ..core.log import get_logger

log = get_logger("export")

FORMATS = ("png", "svg", "pdf")

MEDIA_TYPES = {
    "png": "image/png",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
}

# A4 in points
PDF_PAGE_SIZE = (595, 842)
# Interior box the image is fitted into
PDF_IMAGE_BOX = (340, 340)


class ExportResult(NamedTuple):
    content: bytes
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def parse_format(token: str | None) -> str:
    fmt = (token or "png").strip().lower()
    if fmt not in FORMATS:
        raise ValidationError("Invalid format")
    return fmt


def _result(fmt: str, content: bytes) -> ExportResult:
    return ExportResult(content, MEDIA_TYPES[fmt], f"qr.{fmt}")


# ---------------- SVG ----------------
def export_svg(markup: str) -> ExportResult:
    return _result("svg", markup.encode("utf-8"))


# ---------------- PNG ----------------
def png_bytes(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def export_png(image: Image.Image) -> ExportResult:
    return _result("png", png_bytes(image))


# ---------------- PDF ----------------
def pdf_image_box(img_w: float, img_h: float, page=PDF_PAGE_SIZE, box=PDF_IMAGE_BOX):
    """
    Placement (x, y, w, h) of an image scaled to fit ``box`` with its aspect
    ratio kept, centred on ``page``.
    """
    page_w, page_h = page
    max_w, max_h = box
    scale = min(max_w / img_w, max_h / img_h)
    w, h = img_w * scale, img_h * scale
    return (page_w - w) / 2, (page_h - h) / 2, w, h


def export_pdf(image: Image.Image) -> ExportResult:
    """Single A4 page with the code centred inside the interior box."""
    x, y, w, h = pdf_image_box(*image.size)
    buf = BytesIO()
    try:
        pdf = canvas.Canvas(buf, pagesize=PDF_PAGE_SIZE, invariant=1)
        pdf.setTitle("QR Code")
        pdf.drawImage(ImageReader(image.convert("RGB")), x, y, width=w, height=h)
        pdf.showPage()
        pdf.save()
    except Exception as e:
        raise EncodingError(f"PDF export failed: {e}") from e
    log.info("[PDF] image %dx%d placed at (%.1f, %.1f) size %.1fx%.1f", *image.size, x, y, w, h)
    return _result("pdf", buf.getvalue())
