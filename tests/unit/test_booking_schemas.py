from datetime import datetime, timezone

from pydantic import ValidationError
import pytest

from freelance_booking.schemas.base import validation_message
from freelance_booking.schemas.booking import (
    CREATE_REQUIRED_MESSAGE,
    STATUS_REQUIRED_MESSAGE,
    BookingCreate,
    BookingStatusUpdate,
)


def test_create_accepts_snake_case() -> None:
    data = BookingCreate.model_validate(
        {
            "freelancer_id": "f1",
            "service_id": "s1",
            "start_time": "2030-01-07T09:00:00Z",
            "end_time": "2030-01-07T10:00:00Z",
            "notes": "Bring samples",
        }
    )
    assert data.freelancer_id == "f1"
    assert data.service_id == "s1"
    assert data.start_time == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert data.notes == "Bring samples"


def test_create_accepts_camel_case_and_normalizes_offsets() -> None:
    data = BookingCreate.model_validate(
        {
            "freelancerId": "f1",
            "serviceId": "s1",
            "startTime": "2030-01-07T11:00:00+02:00",
            "endTime": "2030-01-07T12:00:00+02:00",
            "note": "hi",
        }
    )
    assert data.freelancer_id == "f1"
    assert data.start_time == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert data.start_time.tzinfo == timezone.utc
    assert data.notes == "hi"


def test_create_blank_optional_fields_become_none() -> None:
    data = BookingCreate.model_validate(
        {
            "freelancer_id": "f1",
            "service_id": "",
            "start_time": "2030-01-07T09:00:00Z",
            "end_time": "2030-01-07T10:00:00Z",
            "notes": "   ",
        }
    )
    assert data.service_id is None
    assert data.notes is None


def test_create_ignores_unknown_keys() -> None:
    data = BookingCreate.model_validate(
        {
            "freelancer_id": "f1",
            "start_time": "2030-01-07T09:00:00Z",
            "end_time": "2030-01-07T10:00:00Z",
            "client_id": "spoofed",
        }
    )
    assert not hasattr(data, "client_id")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"start_time": "2030-01-07T09:00:00Z", "end_time": "2030-01-07T10:00:00Z"},
        {"freelancer_id": "f1", "end_time": "2030-01-07T10:00:00Z"},
        {"freelancer_id": "f1", "start_time": "2030-01-07T09:00:00Z"},
    ],
)
def test_create_missing_fields_message(payload) -> None:
    with pytest.raises(ValidationError) as exc_info:
        BookingCreate.model_validate(payload)
    assert validation_message(exc_info.value) == CREATE_REQUIRED_MESSAGE


def test_create_bad_timestamp_names_the_field() -> None:
    with pytest.raises(ValidationError) as exc_info:
        BookingCreate.model_validate(
            {"freelancer_id": "f1", "start_time": "tomorrow", "end_time": "2030-01-07T10:00:00Z"}
        )
    assert validation_message(exc_info.value).startswith("start_time")


def test_status_update_accepts_camel_case() -> None:
    data = BookingStatusUpdate.model_validate({"bookingId": "b1", "status": "confirmed"})
    assert (data.booking_id, data.status) == ("b1", "confirmed")


def test_status_update_unwraps_nested_body() -> None:
    data = BookingStatusUpdate.model_validate(
        {"body": {"booking_id": "b1", "status": "rejected", "notes": "Fully booked"}}
    )
    assert data.booking_id == "b1"
    assert data.status == "rejected"
    assert data.notes == "Fully booked"


@pytest.mark.parametrize("payload", [{}, {"booking_id": "b1"}, {"status": "confirmed"}])
def test_status_update_missing_fields_message(payload) -> None:
    with pytest.raises(ValidationError) as exc_info:
        BookingStatusUpdate.model_validate(payload)
    assert validation_message(exc_info.value) == STATUS_REQUIRED_MESSAGE
