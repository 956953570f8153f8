"""Mapping of storage-level write failures on the booking insert path."""

from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from freelance_booking.core.exceptions import (
    InvalidRequestException,
    RepositoryException,
    SlotUnavailableException,
)
from freelance_booking.services.booking_service import BookingService


class _PgError(Exception):
    def __init__(self, message: str, pgcode: str = None, constraint_name: str = None):
        super().__init__(message)
        self.pgcode = pgcode
        self.diag = Mock(constraint_name=constraint_name)


def _integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO bookings", {}, orig)


def _service_with_failing_insert(exc: Exception) -> BookingService:
    repository = MagicMock()
    repository.create.side_effect = exc
    return BookingService(
        MagicMock(),
        notification_service=Mock(),
        availability_service=Mock(),
        repository=repository,
        conflict_checker=Mock(),
    )


@pytest.mark.parametrize(
    "orig",
    [
        _PgError("conflict", constraint_name="bookings_no_overlap_per_freelancer"),
        _PgError("conflicting key value", pgcode="23P01"),
        _PgError(
            'conflicting key value violates exclusion constraint "bookings_no_overlap_per_freelancer"'
        ),
    ],
)
def test_overlap_constraint_violation_is_recognized(orig: Exception) -> None:
    assert BookingService._is_overlap_violation(_integrity_error(orig)) is True


def test_other_integrity_errors_are_not_overlaps() -> None:
    orig = _PgError("null value in column", pgcode="23502")
    assert BookingService._is_overlap_violation(_integrity_error(orig)) is False


def test_overlap_violation_maps_to_slot_unavailable() -> None:
    service = _service_with_failing_insert(
        _integrity_error(_PgError("excl", pgcode="23P01"))
    )
    with pytest.raises(SlotUnavailableException):
        service._insert_booking(freelancer_id="f1")


def test_other_integrity_error_maps_to_invalid_request() -> None:
    service = _service_with_failing_insert(
        _integrity_error(_PgError("foreign key violation", pgcode="23503"))
    )
    with pytest.raises(InvalidRequestException) as exc_info:
        service._insert_booking(freelancer_id="f1")
    assert "Failed to create booking" in exc_info.value.message


def test_deadlock_maps_to_slot_unavailable() -> None:
    deadlock = OperationalError("INSERT INTO bookings", {}, _PgError("deadlock detected", pgcode="40P01"))
    service = _service_with_failing_insert(deadlock)
    with pytest.raises(SlotUnavailableException):
        service._insert_booking(freelancer_id="f1")


def test_other_operational_errors_propagate() -> None:
    lost = OperationalError("INSERT INTO bookings", {}, _PgError("server closed the connection"))
    service = _service_with_failing_insert(lost)
    with pytest.raises(OperationalError):
        service._insert_booking(freelancer_id="f1")


def test_wrapped_exclusion_failure_maps_to_slot_unavailable() -> None:
    service = _service_with_failing_insert(
        RepositoryException("Integrity constraint violated: exclusion constraint")
    )
    with pytest.raises(SlotUnavailableException):
        service._insert_booking(freelancer_id="f1")
