import threading
import zlib

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.history import QRHistory
from .config import settings
from .errors import CollaboratorError
from .log import get_logger

log = get_logger("history")

# Striped per-device locks: bounded memory, same device always maps to the same lock.
_LOCK_STRIPES = 64
_locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]


def _device_lock(device_id: str) -> threading.Lock:
    return _locks[zlib.crc32(device_id.encode("utf-8")) % _LOCK_STRIPES]


def _newest_ids(device_id: str, limit: int):
    return (
        select(QRHistory.id)
        .where(QRHistory.device_id == device_id)
        .order_by(QRHistory.created_at.desc(), QRHistory.id.desc())
        .limit(limit)
    )


def add_record(db: Session, device_id: str, data: str, image_url: str, limit: int | None = None) -> QRHistory:
    """Insert a record and prune the device's history to the ``limit`` newest rows.

    Insert and prune share one transaction; the prune is a single
    ``DELETE ... WHERE id NOT IN (newest N)`` statement.
    """
    limit = limit or settings.HISTORY_LIMIT
    with _device_lock(device_id):
        try:
            record = QRHistory(device_id=device_id, data=data, image_url=image_url)
            db.add(record)
            db.flush()

            pruned = (
                db.query(QRHistory)
                .filter(
                    QRHistory.device_id == device_id,
                    ~QRHistory.id.in_(_newest_ids(device_id, limit)),
                )
                .delete(synchronize_session=False)
            )
            db.commit()
            db.refresh(record)
        except SQLAlchemyError as e:
            db.rollback()
            raise CollaboratorError(f"History update failed: {e}") from e

    if pruned:
        log.info("[HISTORY] device=%s pruned %d old record(s)", device_id[:32], pruned)
    return record


def list_history(db: Session, device_id: str, limit: int | None = None) -> list[QRHistory]:
    """Newest first."""
    limit = limit or settings.HISTORY_LIMIT
    try:
        return (
            db.query(QRHistory)
            .filter(QRHistory.device_id == device_id)
            .order_by(QRHistory.created_at.desc(), QRHistory.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        raise CollaboratorError(f"History query failed: {e}") from e
