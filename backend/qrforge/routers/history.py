from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from ..core.db import get_db
from ..core.errors import ValidationError
from ..core.history import list_history
from ..schemas.qr import ErrorResponse, HistoryResponse

router = APIRouter(tags=["History"])


@router.get("/history", response_model=HistoryResponse, responses={400: {"model": ErrorResponse}})
def get_history(device_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Most recent codes for a device, newest first."""
    device_id = (device_id or "").strip()
    if not device_id:
        raise ValidationError("device_id is required")
    return {"history": [r.to_dict() for r in list_history(db, device_id)]}
