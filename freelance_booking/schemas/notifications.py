# freelance_booking/schemas/notifications.py
"""
Schemas for notification inbox endpoints and notification payloads.

Payload shape is fixed by the notification type. ``NotificationContent``
is a discriminated union on ``type``; every producer and the generic
send endpoint validate through it before anything is stored.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter, model_validator

from .base import StandardizedModel, StrictModel, SuccessEnvelope

NOTIFY_REQUIRED_MESSAGE = "user_id, type, and payload are required"


class BookingRequestPayload(StrictModel):
    """Sent to the freelancer when a client requests a booking."""

    booking_id: str
    client_name: str
    service_title: str
    start_time: str
    end_time: str


class BookingStatusPayload(StrictModel):
    """Sent to the counterpart when a booking changes status."""

    booking_id: str
    service_title: str
    status: str
    start_time: str
    message: str
    # Exactly one of these is present: who acted, from the recipient's side
    freelancer_name: Optional[str] = None
    client_name: Optional[str] = None

    @model_validator(mode="after")
    def _one_counterpart(self) -> "BookingStatusPayload":
        if (self.freelancer_name is None) == (self.client_name is None):
            raise ValueError("exactly one of freelancer_name or client_name is required")
        return self


class BookingRequestNotification(StrictModel):
    type: Literal["booking_request"]
    payload: BookingRequestPayload


class BookingStatusNotification(StrictModel):
    type: Literal["booking_confirmed", "booking_canceled", "booking_completed"]
    payload: BookingStatusPayload

    @model_validator(mode="after")
    def _status_matches_type(self) -> "BookingStatusNotification":
        if self.type != f"booking_{self.payload.status}":
            raise ValueError(f"payload status {self.payload.status!r} does not match {self.type}")
        return self


class GenericNotification(StrictModel):
    type: Literal["generic"]
    payload: Dict[str, Any]


NotificationContent = Annotated[
    Union[BookingRequestNotification, BookingStatusNotification, GenericNotification],
    Field(discriminator="type"),
]

_content_adapter: TypeAdapter[Any] = TypeAdapter(NotificationContent)


def validate_notification_content(type: str, payload: Any) -> Dict[str, Any]:
    """
    Validate ``payload`` against the schema for ``type``.

    Returns the payload as it will be stored. Raises pydantic.ValidationError.
    """
    content = _content_adapter.validate_python({"type": type, "payload": payload})
    if isinstance(content, GenericNotification):
        return dict(content.payload)
    return content.payload.model_dump(mode="json", exclude_none=True)


class NotificationCreate(StandardizedModel):
    """Generic send-notification request."""

    user_id: Optional[str] = None
    type: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _require_fields(self) -> "NotificationCreate":
        if not self.user_id or not self.type or self.payload is None:
            raise ValueError(NOTIFY_REQUIRED_MESSAGE)
        return self


class NotificationResponse(StrictModel):
    """Notification inbox entry."""

    id: str
    user_id: str
    type: str
    payload: Dict[str, Any]
    read: bool
    created_at: Optional[str] = None


class NotificationEnvelope(SuccessEnvelope):
    notification: NotificationResponse
    message: Optional[str] = None


class NotificationListResponse(SuccessEnvelope):
    notifications: List[NotificationResponse]
    unread_count: int = Field(..., ge=0)


class NotificationStatusResponse(SuccessEnvelope):
    """Simple status response for notification actions."""

    message: Optional[str] = None
    updated: int = 0
