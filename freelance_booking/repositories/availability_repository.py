"""
Availability Repository for the booking core

Slot queries for the freelancer's advisory calendar, including the
containment lookup used to flip ``is_booked`` when bookings change.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilitySlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[AvailabilitySlot]):
    def __init__(self, db: Session):
        super().__init__(db, AvailabilitySlot)
        self.logger = logging.getLogger(__name__)

    def get_slots(
        self, freelancer_id: str, starting_after: Optional[datetime] = None
    ) -> List[AvailabilitySlot]:
        """Get the freelancer's slots ordered by start, optionally only those still ahead."""
        try:
            query = self.db.query(AvailabilitySlot).filter(
                AvailabilitySlot.freelancer_id == freelancer_id
            )
            if starting_after is not None:
                query = query.filter(AvailabilitySlot.end_time > starting_after)
            return cast(List[AvailabilitySlot], query.order_by(AvailabilitySlot.start_time).all())
        except Exception as e:
            self.logger.error(f"Error getting slots for {freelancer_id}: {str(e)}")
            raise RepositoryException(f"Failed to get availability slots: {str(e)}") from e

    def get_overlapping_slots(
        self, freelancer_id: str, start_time: datetime, end_time: datetime
    ) -> List[AvailabilitySlot]:
        try:
            return cast(
                List[AvailabilitySlot],
                self.db.query(AvailabilitySlot)
                .filter(
                    AvailabilitySlot.freelancer_id == freelancer_id,
                    AvailabilitySlot.start_time < end_time,
                    AvailabilitySlot.end_time > start_time,
                )
                .all(),
            )
        except Exception as e:
            self.logger.error(f"Error checking slot overlap: {str(e)}")
            raise RepositoryException(f"Failed to check slot overlap: {str(e)}") from e

    def get_for_freelancer(self, freelancer_id: str, slot_id: str) -> Optional[AvailabilitySlot]:
        return self.find_one_by(id=slot_id, freelancer_id=freelancer_id)

    def set_booked_for_window(
        self, freelancer_id: str, start_time: datetime, end_time: datetime, booked: bool
    ) -> int:
        """Set ``is_booked`` on every slot that fully contains [start_time, end_time)."""
        try:
            updated = (
                self.db.query(AvailabilitySlot)
                .filter(
                    AvailabilitySlot.freelancer_id == freelancer_id,
                    AvailabilitySlot.start_time <= start_time,
                    AvailabilitySlot.end_time >= end_time,
                    AvailabilitySlot.is_booked.is_(not booked),
                )
                .update({"is_booked": booked}, synchronize_session="fetch")
            )
            return int(updated or 0)
        except Exception as e:
            self.logger.error(f"Error updating slot booked flag: {str(e)}")
            raise RepositoryException(f"Failed to update slots: {str(e)}") from e
