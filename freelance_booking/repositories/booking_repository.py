# freelance_booking/repositories/booking_repository.py
"""
Booking Repository for the booking core

Implements booking reads with the joins the API returns, plus the
compare-and-swap status update that serializes concurrent transitions.
"""

import logging
from typing import Any, List, Optional, cast

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..utils.time_helpers import utc_now
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> Booking:
        """Create a booking, exposing integrity errors for conflict handling."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        """Get a booking with client, freelancer and service loaded."""
        try:
            return cast(
                Optional[Booking],
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.id == booking_id)
                .populate_existing()
                .first(),
            )
        except Exception as e:
            self.logger.error(f"Error getting booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}") from e

    def get_user_bookings(
        self,
        user_id: str,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> List[Booking]:
        """
        Get bookings where the user is a party, newest start first.

        Args:
            user_id: The caller
            role: ``client`` or ``freelancer`` to restrict the side; None for both
            status: Optional status filter
            limit: Maximum rows
        """
        try:
            query = self._apply_eager_loading(self.db.query(Booking))
            if role == "client":
                query = query.filter(Booking.client_id == user_id)
            elif role == "freelancer":
                query = query.filter(Booking.freelancer_id == user_id)
            else:
                query = query.filter(
                    or_(Booking.client_id == user_id, Booking.freelancer_id == user_id)
                )
            if status:
                query = query.filter(Booking.status == status)
            query = query.order_by(Booking.start_time.desc(), Booking.id.desc()).limit(limit)
            return cast(List[Booking], query.all())
        except Exception as e:
            self.logger.error(f"Error getting bookings for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user bookings: {str(e)}") from e

    def update_status_if_current(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        new_status: BookingStatus,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Conditionally move a booking from ``expected_status`` to ``new_status``.

        Returns False when the row no longer holds ``expected_status``, i.e. a
        concurrent request changed it first.
        """
        values: dict = {"status": new_status.value, "updated_at": utc_now()}
        if notes is not None:
            values["notes"] = notes
        try:
            updated = (
                self.db.query(Booking)
                .filter(Booking.id == booking_id, Booking.status == expected_status.value)
                .update(values, synchronize_session="fetch")
            )
            return bool(updated)
        except Exception as e:
            self.logger.error(f"Error updating status for booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to update booking status: {str(e)}") from e

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.client),
            joinedload(Booking.freelancer),
            joinedload(Booking.service),
        )
