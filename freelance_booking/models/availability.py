"""
Availability slot model.

Slots are freelancer-declared calendar hints. They are advisory only:
the ``booked`` flag tracks whether a confirmed booking sits inside the
slot, but conflicts are always computed from bookings.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, String
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from ..utils.time_helpers import isoformat_utc, utc_now
from .types import UTCDateTime


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    freelancer_id = Column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    start_time = Column(UTCDateTime(), nullable=False)
    end_time = Column(UTCDateTime(), nullable=False)
    is_booked = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now, server_default=func.now())

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_availability_slots_time_order"),
        Index("ix_availability_slots_freelancer_start", "freelancer_id", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot {self.id}: freelancer={self.freelancer_id}, "
            f"{self.start_time}-{self.end_time}, booked={self.is_booked}>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "freelancer_id": self.freelancer_id,
            "start_time": isoformat_utc(self.start_time),
            "end_time": isoformat_utc(self.end_time),
            "is_booked": self.is_booked,
            "created_at": isoformat_utc(self.created_at),
        }
