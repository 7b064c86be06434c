from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from ..core.db import Base


DEVICE_ID_MAX_LENGTH = 128


def _utcnow():
    return datetime.now(timezone.utc)


class QRHistory(Base):
    __tablename__ = "qr_history"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String(DEVICE_ID_MAX_LENGTH), nullable=False, index=True)

    # --- Encoded payload + stored image ---
    data = Column(Text, nullable=False)
    image_url = Column(String(512), nullable=False)

    # Set in Python so rows inserted within the same second still order correctly
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_qr_history_device_created", "device_id", "created_at"),)

    def to_dict(self):
        return {
            "id": self.id,
            "data": self.data,
            "image_url": self.image_url,
            "created_at": self.created_at_utc().isoformat() if self.created_at else None,
        }

    def created_at_utc(self):
        """SQLite hands back naive datetimes; stored values are always UTC."""
        if self.created_at.tzinfo is None:
            return self.created_at.replace(tzinfo=timezone.utc)
        return self.created_at.astimezone(timezone.utc)

    def __repr__(self):
        return f"<QRHistory(id={self.id}, device_id='{self.device_id}', data='{self.data[:40]}')>"
