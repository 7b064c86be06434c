# backend/qrforge/routers/qr.py
from fastapi import APIRouter, Depends, Form, File, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional
import io

from ..core.db import get_db
from ..core.errors import CollaboratorError, EncodingError, QRForgeError, ValidationError
from ..core.history import add_record
from ..core.log import get_logger
from ..core.pipeline import LogoUpload, prepare_request, render_export, render_raster
from ..core.storage import LocalBlobStorage, get_storage, new_image_name
from ..models.history import DEVICE_ID_MAX_LENGTH
from ..schemas.qr import ErrorResponse, GenerateResponse
from ..utils.export import parse_format, png_bytes

router = APIRouter(tags=["QR Generator"])
log = get_logger("routers.qr")

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _read_logo(logo: Optional[UploadFile]) -> Optional[LogoUpload]:
    """An empty file part (no file picked in the form) counts as no logo."""
    if logo is None:
        return None
    content = logo.file.read()
    if not content and not logo.filename:
        return None
    return LogoUpload(content=content, content_type=logo.content_type or "")


# -----------------------------
# Generate + store + history
# -----------------------------
@router.post("/generate", response_model=GenerateResponse, responses=ERROR_RESPONSES)
def generate(
    data: Optional[str] = Form(None),
    device_id: Optional[str] = Form(None),
    fgColor: Optional[str] = Form(None),
    bgColor: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_storage),
):
    """Render a QR code, upload it and append it to the device's history."""
    device_id = (device_id or "").strip()
    if not device_id:
        raise ValidationError("device_id is required")
    if len(device_id) > DEVICE_ID_MAX_LENGTH:
        raise ValidationError(f"device_id must be at most {DEVICE_ID_MAX_LENGTH} characters")

    try:
        req = prepare_request(data, fgColor, bgColor, _read_logo(logo), strict=True)
        image = png_bytes(render_raster(req))
    except QRForgeError:
        raise
    except Exception as e:
        log.exception("[GENERATE] unexpected failure")
        raise EncodingError(str(e) or "Generation failed") from e

    image_url = storage.upload(new_image_name("png"), image, content_type="image/png")

    try:
        add_record(db, device_id, req.normalized_text, image_url)
    except CollaboratorError:
        # The blob stays behind; there is no compensating delete.
        log.warning("[GENERATE] history insert failed, orphaned image %s", image_url)
        raise

    return {"success": True, "image_url": image_url, "data": req.normalized_text}


# -----------------------------
# Download (png / svg / pdf)
# -----------------------------
@router.post("/download", responses=ERROR_RESPONSES)
def download(
    data: Optional[str] = Form(None),
    fmt: Optional[str] = Form("png", alias="format"),
    fgColor: Optional[str] = Form(None),
    bgColor: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
):
    """Render the code in the requested format as an attachment."""
    if not (data or "").strip():
        raise ValidationError("data is required")
    fmt = parse_format(fmt)

    try:
        # Vector output has no logo support; drop it instead of failing.
        upload = None if fmt == "svg" else _read_logo(logo)
        req = prepare_request(data, fgColor, bgColor, upload, strict=False)
        result = render_export(req, fmt)
    except QRForgeError:
        raise
    except Exception as e:
        log.exception("[DOWNLOAD] unexpected failure")
        raise EncodingError(str(e) or "Download failed") from e

    return StreamingResponse(
        io.BytesIO(result.content),
        media_type=result.media_type,
        headers={"Content-Disposition": result.content_disposition},
    )
