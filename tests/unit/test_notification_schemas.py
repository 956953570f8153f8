from pydantic import ValidationError
import pytest

from freelance_booking.schemas.notifications import (
    NOTIFY_REQUIRED_MESSAGE,
    NotificationCreate,
    validate_notification_content,
)
from freelance_booking.schemas.base import validation_message


def _request_payload(**overrides):
    payload = {
        "booking_id": "b1",
        "client_name": "Casey Client",
        "service_title": "Logo design",
        "start_time": "2030-01-07T09:00:00+00:00",
        "end_time": "2030-01-07T10:00:00+00:00",
    }
    payload.update(overrides)
    return payload


def _status_payload(status="confirmed", **overrides):
    payload = {
        "booking_id": "b1",
        "service_title": "Logo design",
        "status": status,
        "start_time": "2030-01-07T09:00:00+00:00",
        "message": f"Your booking has been {status}",
        "freelancer_name": "Frankie Freelancer",
    }
    payload.update(overrides)
    return payload


def test_booking_request_payload_round_trips() -> None:
    assert validate_notification_content("booking_request", _request_payload()) == _request_payload()


def test_booking_request_rejects_missing_field() -> None:
    payload = _request_payload()
    del payload["client_name"]
    with pytest.raises(ValidationError):
        validate_notification_content("booking_request", payload)


def test_booking_request_rejects_unknown_field() -> None:
    with pytest.raises(ValidationError):
        validate_notification_content("booking_request", _request_payload(amount=10))


@pytest.mark.parametrize("status", ["confirmed", "canceled", "completed"])
def test_status_payload_matches_type(status: str) -> None:
    stored = validate_notification_content(f"booking_{status}", _status_payload(status))
    assert stored["status"] == status
    assert "client_name" not in stored


def test_status_payload_must_agree_with_type() -> None:
    with pytest.raises(ValidationError):
        validate_notification_content("booking_confirmed", _status_payload("canceled"))


def test_status_payload_needs_exactly_one_counterpart() -> None:
    with pytest.raises(ValidationError):
        validate_notification_content(
            "booking_canceled", _status_payload("canceled", client_name="Casey Client")
        )
    payload = _status_payload("canceled")
    del payload["freelancer_name"]
    with pytest.raises(ValidationError):
        validate_notification_content("booking_canceled", payload)


def test_client_side_status_payload() -> None:
    payload = _status_payload("canceled", message="Booking has been canceled by client")
    del payload["freelancer_name"]
    payload["client_name"] = "Casey Client"
    assert validate_notification_content("booking_canceled", payload)["client_name"] == "Casey Client"


def test_generic_accepts_any_object() -> None:
    assert validate_notification_content("generic", {"anything": [1, 2]}) == {"anything": [1, 2]}


def test_unknown_type_rejected() -> None:
    with pytest.raises(ValidationError):
        validate_notification_content("booking_rescheduled", {})


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"user_id": "u1", "type": "generic"},
        {"type": "generic", "payload": {}},
        {"user_id": "u1", "payload": {}},
    ],
)
def test_create_request_requires_fields(body) -> None:
    with pytest.raises(ValidationError) as exc_info:
        NotificationCreate.model_validate(body)
    assert validation_message(exc_info.value) == NOTIFY_REQUIRED_MESSAGE


def test_create_request_allows_empty_payload_object() -> None:
    data = NotificationCreate.model_validate({"user_id": "u1", "type": "generic", "payload": {}})
    assert data.payload == {}
