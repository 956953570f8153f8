# freelance_booking/models/booking.py
"""
Booking model for the freelancer marketplace.

A booking is a client's reservation of a freelancer's time for a half-open
interval [start_time, end_time). Bookings are the authoritative calendar:
conflict detection reads them directly, never availability slots.

Status only moves along ALLOWED_TRANSITIONS; pending and confirmed
bookings hold the freelancer's time, completed and canceled are terminal.
"""

from enum import Enum
import logging
from typing import Any, Dict, FrozenSet

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from ..utils.time_helpers import isoformat_utc, utc_now
from .types import UTCDateTime

logger = logging.getLogger(__name__)

CUSTOM_BOOKING_TITLE = "Custom booking"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Requested by client, awaiting freelancer
    CONFIRMED = "confirmed"  # Accepted by freelancer
    COMPLETED = "completed"  # Work delivered
    CANCELED = "canceled"  # Rejected by freelancer or canceled by either party

    @classmethod
    def parse(cls, value: str) -> "BookingStatus":
        """Parse an inbound status; ``rejected`` shares the canceled representation."""
        normalized = (value or "").strip().lower()
        if normalized == "rejected":
            return cls.CANCELED
        return cls(normalized)


ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELED: frozenset(),
}

# Statuses that occupy the freelancer's calendar
ACTIVE_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


class Booking(Base):
    """Reservation of a freelancer's time by a client."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    client_id = Column(String(64), ForeignKey("profiles.id"), nullable=False)
    freelancer_id = Column(String(64), ForeignKey("profiles.id"), nullable=False)
    service_id = Column(String(64), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)

    start_time = Column(UTCDateTime(), nullable=False)
    end_time = Column(UTCDateTime(), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    total_amount_cents = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(UTCDateTime(), nullable=False, default=utc_now, server_default=func.now())
    updated_at = Column(UTCDateTime(), nullable=True, onupdate=utc_now)

    client = relationship("Profile", foreign_keys=[client_id])
    freelancer = relationship("Profile", foreign_keys=[freelancer_id])
    service = relationship("Service", foreign_keys=[service_id])

    # The per-freelancer no-overlap exclusion constraint is PostgreSQL-only and
    # lives in the migration (bookings_no_overlap_per_freelancer).
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_bookings_time_order"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'canceled')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "total_amount_cents IS NULL OR total_amount_cents >= 0",
            name="ck_bookings_amount_non_negative",
        ),
        Index("ix_bookings_freelancer_status_start", "freelancer_id", "status", "start_time"),
        Index("ix_bookings_client_start", "client_id", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: client={self.client_id}, "
            f"freelancer={self.freelancer_id}, "
            f"window={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def status_enum(self) -> BookingStatus:
        return BookingStatus(self.status)

    def can_transition_to(self, target: BookingStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status_enum]

    def involves(self, user_id: str) -> bool:
        return user_id in (self.client_id, self.freelancer_id)

    @property
    def service_title(self) -> str:
        if self.service is not None and self.service.title:
            return self.service.title
        return CUSTOM_BOOKING_TITLE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses, including joined display fields."""
        freelancer = self.freelancer
        client = self.client
        service = self.service
        return {
            "id": self.id,
            "client_id": self.client_id,
            "freelancer_id": self.freelancer_id,
            "service_id": self.service_id,
            "start_time": isoformat_utc(self.start_time),
            "end_time": isoformat_utc(self.end_time),
            "status": self.status,
            "total_amount_cents": self.total_amount_cents,
            "notes": self.notes,
            "created_at": isoformat_utc(self.created_at),
            "updated_at": isoformat_utc(self.updated_at),
            "freelancer": (
                {"display_name": freelancer.display_name, "avatar_url": freelancer.avatar_url}
                if freelancer is not None
                else None
            ),
            "client": {"display_name": client.display_name} if client is not None else None,
            "service": (
                {"title": service.title, "description": service.description}
                if service is not None
                else None
            ),
        }
