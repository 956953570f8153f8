"""
Models package for the booking core.

Importing this package registers every table on ``Base.metadata``.
"""

from ..database import Base
from .availability import AvailabilitySlot
from .booking import (
    ACTIVE_STATUSES,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
)
from .notification import Notification, NotificationType
from .profile import Profile, ProfileRole
from .service import Service

__all__ = [
    "Base",
    "AvailabilitySlot",
    "Booking",
    "BookingStatus",
    "ACTIVE_STATUSES",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "Notification",
    "NotificationType",
    "Profile",
    "ProfileRole",
    "Service",
]
