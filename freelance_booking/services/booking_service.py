# freelance_booking/services/booking_service.py
"""
Booking Service for the booking core

Owns the booking lifecycle:
- Creation: validate, check the freelancer's calendar, price, persist,
  then notify the freelancer
- Status transitions: permission and state-machine checks, a conditional
  update that serializes racing requests, then notification side effects
- Reads for the parties of a booking

Writes commit before any side effect runs. Notification and slot updates
are best-effort and never undo a committed booking change.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..core.calendar_lock import calendar_lock
from ..core.exceptions import (
    InvalidRequestException,
    InvalidTransitionException,
    NotConfirmedException,
    NotFoundException,
    RepositoryException,
    ServiceUnavailableException,
    SlotUnavailableException,
    UnauthorizedException,
)
from ..models.booking import Booking, BookingStatus
from ..models.notification import NotificationType
from ..models.profile import Profile
from ..models.service import Service
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..schemas.booking import CREATE_REQUIRED_MESSAGE
from ..utils.time_helpers import ensure_utc, isoformat_utc
from .availability_service import AvailabilityService
from .base import BaseService
from .conflict_checker import ConflictChecker
from .notification_service import NotificationService
from .pricing_service import price_for_service

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT_NAME = "bookings_no_overlap_per_freelancer"
EXCLUSION_VIOLATION_PGCODE = "23P01"
DEADLOCK_PGCODE = "40P01"

UNKNOWN_USER_LABEL = "Unknown user"


class StatusChangeResult(NamedTuple):
    booking: Booking
    changed: bool
    message: str


class BookingService(BaseService):
    """Service layer for booking creation, status transitions and reads."""

    @staticmethod
    def _pgcode(exc: Exception) -> Optional[str]:
        orig = getattr(exc, "orig", None)
        return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)

    @classmethod
    def _is_deadlock_error(cls, exc: OperationalError) -> bool:
        if cls._pgcode(exc) == DEADLOCK_PGCODE:
            return True
        return "deadlock detected" in str(exc).lower()

    @classmethod
    def _is_overlap_violation(cls, exc: IntegrityError) -> bool:
        """Whether ``exc`` came from the per-freelancer no-overlap exclusion constraint."""
        orig = getattr(exc, "orig", None)
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None) or ""
        if constraint_name == OVERLAP_CONSTRAINT_NAME:
            return True
        if cls._pgcode(exc) == EXCLUSION_VIOLATION_PGCODE:
            return True
        text = str(orig if orig is not None else exc)
        return OVERLAP_CONSTRAINT_NAME in text or "exclusion constraint" in text.lower()

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        availability_service: Optional[AvailabilityService] = None,
        repository: Optional[BookingRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            notification_service: Optional notification dispatcher
            availability_service: Optional availability service for slot flags
            repository: Optional BookingRepository instance
            conflict_checker: Optional ConflictChecker instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.notification_service = notification_service or NotificationService(db)
        self.availability_service = availability_service or AvailabilityService(db)
        self.profile_repository = RepositoryFactory.create_base_repository(db, Profile)

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        client_id: str,
        freelancer_id: Optional[str],
        start_time: Optional[datetime],
        end_time: Optional[datetime],
        service_id: Optional[str] = None,
        notes: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> Booking:
        """
        Create a pending booking for ``client_id`` on the freelancer's calendar.

        Args:
            client_id: The requesting client
            freelancer_id: The freelancer being booked
            start_time: Start of the requested window
            end_time: End of the requested window (exclusive)
            service_id: Optional service listing; drives the total amount
            notes: Optional free-text notes
            client_name: Name shown to the freelancer; defaults to the client's profile

        Returns:
            The created booking with freelancer, client and service loaded

        Raises:
            InvalidRequestException: Missing fields or end_time <= start_time
            NotFoundException: Freelancer profile does not exist
            ServiceUnavailableException: Service missing, inactive or not the freelancer's
            SlotUnavailableException: Window overlaps a pending or confirmed booking
        """
        if not freelancer_id or start_time is None or end_time is None:
            raise InvalidRequestException(CREATE_REQUIRED_MESSAGE)
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)

        self.log_operation(
            "create_booking",
            client_id=client_id,
            freelancer_id=freelancer_id,
            service_id=service_id,
            start_time=isoformat_utc(start_time),
            end_time=isoformat_utc(end_time),
        )

        # 1. Validate the window and the referenced records
        self.conflict_checker.validate_interval(start_time, end_time)
        if self.profile_repository.get_by_id(freelancer_id, load_relationships=False) is None:
            raise NotFoundException("Freelancer not found")
        service = self._load_bookable_service(service_id, freelancer_id)

        # 2. Price
        total_amount_cents = price_for_service(service, start_time, end_time)

        # 3. Check and insert while holding the freelancer's calendar
        with calendar_lock(freelancer_id):
            if self.conflict_checker.has_conflict(freelancer_id, start_time, end_time):
                raise SlotUnavailableException()
            booking_id = self._insert_booking(
                client_id=client_id,
                freelancer_id=freelancer_id,
                service_id=service.id if service is not None else None,
                start_time=start_time,
                end_time=end_time,
                total_amount_cents=total_amount_cents,
                notes=notes,
            )

        booking = self._reload(booking_id)
        self.logger.info(
            f"Booking {booking.id} created",
            extra={
                "booking_id": booking.id,
                "freelancer_id": freelancer_id,
                "status": booking.status,
            },
        )

        # 4. Tell the freelancer
        self.notification_service.notify_best_effort(
            freelancer_id,
            NotificationType.BOOKING_REQUEST.value,
            {
                "booking_id": booking.id,
                "client_name": client_name or self._profile_label(booking.client),
                "service_title": booking.service_title,
                "start_time": isoformat_utc(booking.start_time),
                "end_time": isoformat_utc(booking.end_time),
            },
        )
        return booking

    def _load_bookable_service(
        self, service_id: Optional[str], freelancer_id: str
    ) -> Optional[Service]:
        if not service_id:
            return None
        service = self.conflict_checker.repository.get_service(service_id)
        if service is None or service.freelancer_id != freelancer_id or not service.is_active:
            raise ServiceUnavailableException()
        return service

    def _insert_booking(self, **fields: Any) -> str:
        """Insert and commit a pending booking; storage-level overlap maps to SlotUnavailable."""
        try:
            with self.repository.transaction():
                booking = self.repository.create(status=BookingStatus.PENDING.value, **fields)
                booking_id = booking.id
        except IntegrityError as exc:
            if self._is_overlap_violation(exc):
                self.logger.warning(
                    "Booking insert rejected by overlap constraint",
                    extra={"freelancer_id": fields.get("freelancer_id")},
                )
                raise SlotUnavailableException() from exc
            raise InvalidRequestException(f"Failed to create booking: {exc.orig}") from exc
        except OperationalError as exc:
            if self._is_deadlock_error(exc):
                raise SlotUnavailableException() from exc
            raise
        except RepositoryException as exc:
            message = str(exc).lower()
            if "deadlock detected" in message or "exclusion constraint" in message:
                raise SlotUnavailableException() from exc
            raise
        return booking_id

    # Status transitions

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self,
        actor_id: str,
        booking_id: str,
        new_status: str,
        notes: Optional[str] = None,
    ) -> StatusChangeResult:
        """
        Move a booking along its lifecycle on behalf of one of its parties.

        Repeating a request for the status the booking already has succeeds
        without side effects.

        Raises:
            NotFoundException: Booking does not exist
            UnauthorizedException: Actor is not a party, or a client tries to confirm
            InvalidRequestException: Unknown status value
            NotConfirmedException: Completion of a booking that is not confirmed
            InvalidTransitionException: Transition not allowed, or lost a race
        """
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")

        is_freelancer = actor_id == booking.freelancer_id
        if not is_freelancer and actor_id != booking.client_id:
            raise UnauthorizedException()

        try:
            target = BookingStatus.parse(new_status)
        except ValueError as exc:
            raise InvalidRequestException(f"Invalid status: {new_status}") from exc

        current = booking.status_enum
        if current == target:
            return StatusChangeResult(booking, False, f"Booking is already {target.value}")

        if target == BookingStatus.COMPLETED and current != BookingStatus.CONFIRMED:
            raise NotConfirmedException(from_status=current.value, to_status=target.value)
        if not booking.can_transition_to(target):
            raise InvalidTransitionException(from_status=current.value, to_status=target.value)
        if target == BookingStatus.CONFIRMED and not is_freelancer:
            raise UnauthorizedException("Only freelancers can confirm bookings")

        with self.repository.transaction():
            swapped = self.repository.update_status_if_current(
                booking.id, current, target, notes=notes or None
            )
            if not swapped:
                raise InvalidTransitionException(
                    f"Booking was updated by another request; "
                    f"cannot change status from {current.value} to {target.value}",
                    from_status=current.value,
                    to_status=target.value,
                )

        booking = self._reload(booking.id)
        self.log_operation(
            "update_booking_status",
            booking_id=booking.id,
            actor_id=actor_id,
            from_status=current.value,
            status=target.value,
        )

        self._after_status_change(booking, current, target, is_freelancer)
        return StatusChangeResult(booking, True, f"Booking {target.value} successfully")

    def _after_status_change(
        self,
        booking: Booking,
        previous: BookingStatus,
        target: BookingStatus,
        freelancer_acted: bool,
    ) -> None:
        """Post-commit side effects, in order: retract, notify, slot flags."""
        if freelancer_acted and target in (BookingStatus.CONFIRMED, BookingStatus.CANCELED):
            self.notification_service.retract_best_effort(booking.freelancer_id, booking.id)

        recipient_id, payload = self._status_notification(booking, target, freelancer_acted)
        self.notification_service.notify_best_effort(
            recipient_id,
            NotificationType.for_booking_status(target.value).value,
            payload,
        )

        if target == BookingStatus.CONFIRMED:
            self.availability_service.sync_booked_flag(booking, booked=True)
        elif target == BookingStatus.CANCELED and previous == BookingStatus.CONFIRMED:
            self.availability_service.sync_booked_flag(booking, booked=False)

    def _status_notification(
        self, booking: Booking, target: BookingStatus, freelancer_acted: bool
    ) -> tuple:
        payload: Dict[str, Any] = {
            "booking_id": booking.id,
            "service_title": booking.service_title,
            "status": target.value,
            "start_time": isoformat_utc(booking.start_time),
        }
        if freelancer_acted:
            payload["freelancer_name"] = self._profile_label(booking.freelancer)
            payload["message"] = f"Your booking has been {target.value}"
            return booking.client_id, payload
        payload["client_name"] = self._profile_label(booking.client)
        payload["message"] = f"Booking has been {target.value} by client"
        return booking.freelancer_id, payload

    # Reads

    @BaseService.measure_operation("get_booking")
    def get_booking(self, actor_id: str, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        if not booking.involves(actor_id):
            raise UnauthorizedException("Unauthorized: You can only view your own bookings")
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, actor_id: str, role: Optional[str] = None, status: Optional[str] = None
    ) -> List[Booking]:
        """The actor's bookings as client and/or freelancer, newest start first."""
        if role is not None and role not in ("client", "freelancer"):
            raise InvalidRequestException(f"Invalid role: {role}")
        status_value = None
        if status:
            try:
                status_value = BookingStatus.parse(status).value
            except ValueError as exc:
                raise InvalidRequestException(f"Invalid status: {status}") from exc
        return self.repository.get_user_bookings(actor_id, role=role, status=status_value)

    # Helpers

    def _reload(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        return booking

    @staticmethod
    def _profile_label(profile: Optional[Profile]) -> str:
        return profile.label if profile is not None else UNKNOWN_USER_LABEL
