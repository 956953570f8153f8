"""
Service listing model (catalog collaborator).

Only the fields the booking core consumes are mapped: owner, hourly price
in minor units, default duration and the active flag.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from ..utils.time_helpers import utc_now
from .types import UTCDateTime


class Service(Base):
    __tablename__ = "services"

    id = Column(String(64), primary_key=True, default=generate_ulid)
    freelancer_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now, server_default=func.now())

    freelancer = relationship("Profile", foreign_keys=[freelancer_id])

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_services_price_non_negative"),
        Index("ix_services_freelancer_active", "freelancer_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Service {self.id}: {self.title} ({self.price_cents}c/h)>"
