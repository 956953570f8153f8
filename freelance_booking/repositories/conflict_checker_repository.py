# freelance_booking/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the booking core

Conflict checking reads bookings only. Availability slots are advisory
and never consulted here.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import ACTIVE_STATUSES, Booking
from ..models.service import Service
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_overlapping_bookings(
        self,
        freelancer_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Get the freelancer's active bookings overlapping [start_time, end_time).

        Half-open intervals: a booking ending exactly at ``start_time`` (or
        starting exactly at ``end_time``) does not overlap.
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.freelancer_id == freelancer_id,
                Booking.status.in_([status.value for status in ACTIVE_STATUSES]),
                Booking.start_time < end_time,
                Booking.end_time > start_time,
            )

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return cast(List[Booking], query.order_by(Booking.start_time).all())

        except Exception as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}") from e

    def get_service(self, service_id: str) -> Optional[Service]:
        """Load a service listing regardless of owner or active flag."""
        try:
            return cast(
                Optional[Service],
                self.db.query(Service).filter(Service.id == service_id).first(),
            )
        except Exception as e:
            self.logger.error(f"Error getting service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to get service: {str(e)}") from e
