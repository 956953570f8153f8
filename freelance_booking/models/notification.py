"""
Notification model.

In-app inbox entries. The shape of ``payload`` is fixed by ``type``; see
``schemas/notifications.py`` for the per-type payload schemas.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Column, ForeignKey, Index, String
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from ..core.ulid_helper import generate_ulid
from ..database import Base
from ..utils.time_helpers import isoformat_utc, utc_now
from .types import UTCDateTime


class NotificationType(str, Enum):
    BOOKING_REQUEST = "booking_request"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELED = "booking_canceled"
    BOOKING_COMPLETED = "booking_completed"
    GENERIC = "generic"

    @classmethod
    def for_booking_status(cls, status: str) -> "NotificationType":
        """Map a booking status to its ``booking_{status}`` notification type."""
        return cls(f"booking_{status}")


class Notification(Base):
    """In-app notification inbox entry."""

    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now, server_default=func.now())

    __table_args__ = (
        Index("ix_notifications_user_type", "user_id", "type"),
        Index("ix_notifications_user_read", "user_id", "read"),
        Index("ix_notifications_user_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.id}: user={self.user_id}, type={self.type}, read={self.read}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "payload": self.payload or {},
            "read": self.read,
            "created_at": isoformat_utc(self.created_at),
        }


__all__ = ["Notification", "NotificationType"]
