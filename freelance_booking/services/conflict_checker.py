# freelance_booking/services/conflict_checker.py
"""
Conflict Checker Service for the booking core

Determines whether a candidate window overlaps any of a freelancer's
pending or confirmed bookings. Intervals are half-open, so back-to-back
bookings are allowed.

The check alone is not race-free; BookingService runs it under the
freelancer's calendar lock, and PostgreSQL backs it with an exclusion
constraint.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import InvalidIntervalException
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..utils.time_helpers import ensure_utc, isoformat_utc
from .base import BaseService

logger = logging.getLogger(__name__)


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap test for [start_a, end_a) and [start_b, end_b)."""
    return start_a < end_b and start_b < end_a


class ConflictChecker(BaseService):
    """Service for checking booking conflicts and interval validation."""

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @staticmethod
    def validate_interval(start_time: datetime, end_time: datetime) -> None:
        """Raise InvalidIntervalException unless end_time > start_time."""
        if ensure_utc(end_time) <= ensure_utc(start_time):
            raise InvalidIntervalException()

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        freelancer_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List the active bookings that overlap the requested window.

        Args:
            freelancer_id: The freelancer whose calendar is checked
            start_time: Start of the requested window
            end_time: End of the requested window (exclusive)
            exclude_booking_id: Optional booking ID to ignore

        Returns:
            One dict per conflicting booking
        """
        self.validate_interval(start_time, end_time)

        bookings = self.repository.get_overlapping_bookings(
            freelancer_id, ensure_utc(start_time), ensure_utc(end_time), exclude_booking_id
        )
        conflicts = [
            {
                "booking_id": booking.id,
                "start_time": isoformat_utc(booking.start_time),
                "end_time": isoformat_utc(booking.end_time),
                "status": booking.status,
            }
            for booking in bookings
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} conflicting bookings for freelancer {freelancer_id}",
                extra={
                    "freelancer_id": freelancer_id,
                    "start_time": isoformat_utc(start_time),
                    "end_time": isoformat_utc(end_time),
                    "conflict_count": len(conflicts),
                },
            )
        return conflicts

    def has_conflict(
        self,
        freelancer_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Whether the window overlaps any pending or confirmed booking."""
        return bool(
            self.check_booking_conflicts(freelancer_id, start_time, end_time, exclude_booking_id)
        )
