# freelance_booking/services/availability_service.py
"""
Availability Service for the booking core

Manages freelancer-declared availability slots. Slots are advisory: the
booking path never reads them for conflict detection, it only flips their
``is_booked`` flag when a booking inside them is confirmed or released.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    InvalidIntervalException,
    InvalidRequestException,
    NotFoundException,
    UnauthorizedException,
)
from ..models.availability import AvailabilitySlot
from ..models.booking import Booking
from ..models.profile import Profile
from ..repositories import RepositoryFactory
from ..repositories.availability_repository import AvailabilityRepository
from ..utils.time_helpers import ensure_utc, utc_now
from .base import BaseService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    """Service for the freelancer's advisory availability calendar."""

    def __init__(self, db: Session, repository: Optional[AvailabilityRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_availability_repository(db)
        self.profile_repository = RepositoryFactory.create_base_repository(db, Profile)

    def _require_freelancer(self, user_id: str) -> Profile:
        profile = self.profile_repository.get_by_id(user_id, load_relationships=False)
        if profile is None or not profile.is_freelancer:
            raise UnauthorizedException("Only freelancers can manage availability")
        return profile

    @BaseService.measure_operation("create_slot")
    def create_slot(
        self, freelancer_id: str, start_time: datetime, end_time: datetime
    ) -> AvailabilitySlot:
        """
        Declare a new availability slot.

        Raises:
            UnauthorizedException: Caller has no freelancer profile
            InvalidIntervalException: end_time <= start_time
            InvalidRequestException: Slot overlaps one of the caller's slots
        """
        self._require_freelancer(freelancer_id)
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        if end_time <= start_time:
            raise InvalidIntervalException()

        if self.repository.get_overlapping_slots(freelancer_id, start_time, end_time):
            raise InvalidRequestException("Availability slot overlaps an existing slot")

        with self.transaction():
            slot = self.repository.create(
                freelancer_id=freelancer_id,
                start_time=start_time,
                end_time=end_time,
                is_booked=False,
            )

        self.log_operation("create_slot", freelancer_id=freelancer_id, slot_id=slot.id)
        return slot

    @BaseService.measure_operation("list_slots")
    def list_slots(self, freelancer_id: str, upcoming_only: bool = True) -> List[AvailabilitySlot]:
        return self.repository.get_slots(
            freelancer_id, starting_after=utc_now() if upcoming_only else None
        )

    @BaseService.measure_operation("delete_slot")
    def delete_slot(self, freelancer_id: str, slot_id: str) -> None:
        slot = self.repository.get_for_freelancer(freelancer_id, slot_id)
        if slot is None:
            raise NotFoundException("Availability slot not found")
        with self.transaction():
            self.repository.delete(slot.id)
        self.log_operation("delete_slot", freelancer_id=freelancer_id, slot_id=slot_id)

    def sync_booked_flag(self, booking: Booking, booked: bool) -> int:
        """
        Flip ``is_booked`` on the slots that fully contain ``booking``.

        Post-commit side effect of a status change; failures are logged only.
        """
        try:
            with self.transaction():
                updated = self.repository.set_booked_for_window(
                    booking.freelancer_id, booking.start_time, booking.end_time, booked
                )
            return updated
        except Exception as exc:
            self.logger.error(
                f"Failed to update availability slots for booking {booking.id}: {str(exc)}",
                extra={"booking_id": booking.id, "freelancer_id": booking.freelancer_id},
            )
            return 0
