"""
Profile model (identity collaborator).

Profiles are owned by the account/profile surface of the marketplace; the
booking core only reads them for display names and role checks.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, String
from sqlalchemy.sql import func

from ..database import Base
from ..utils.time_helpers import utc_now
from .types import UTCDateTime


class ProfileRole(str, Enum):
    CLIENT = "client"
    FREELANCER = "freelancer"


class Profile(Base):
    """Public profile of a marketplace user."""

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    display_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    role = Column(String(20), nullable=False, default=ProfileRole.CLIENT.value)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now, server_default=func.now())

    __table_args__ = (
        CheckConstraint("role IN ('client', 'freelancer')", name="ck_profiles_role"),
    )

    @property
    def is_freelancer(self) -> bool:
        return self.role == ProfileRole.FREELANCER.value

    @property
    def label(self) -> str:
        """Name shown to the counterpart; falls back to the email address."""
        return self.display_name or self.email or "Unknown user"

    def __repr__(self) -> str:
        return f"<Profile {self.id}: role={self.role}>"
