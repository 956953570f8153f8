# freelance_booking/schemas/booking.py
"""
Booking request and response schemas.

Request bodies accept snake_case or camelCase keys. Required-field
problems surface with the same messages the booking endpoints have always
returned, so clients can keep matching on them.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from ..utils.time_helpers import ensure_utc
from .base import StandardizedModel, StrictModel, SuccessEnvelope, unwrap_body_envelope

CREATE_REQUIRED_MESSAGE = "freelancer_id, start_time, and end_time are required"
STATUS_REQUIRED_MESSAGE = "booking_id and status are required"


class BookingCreate(StandardizedModel):
    """Client request to reserve a freelancer's time."""

    freelancer_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("freelancer_id", "freelancerId")
    )
    service_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("service_id", "serviceId")
    )
    start_time: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("start_time", "startTime")
    )
    end_time: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("end_time", "endTime")
    )
    notes: Optional[str] = Field(default=None, validation_alias=AliasChoices("notes", "note"))

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @field_validator("service_id", "notes")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def _require_window(self) -> "BookingCreate":
        if not self.freelancer_id or self.start_time is None or self.end_time is None:
            raise ValueError(CREATE_REQUIRED_MESSAGE)
        return self


class BookingStatusUpdate(StandardizedModel):
    """Party request to move a booking through its lifecycle."""

    booking_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("booking_id", "bookingId")
    )
    status: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        return unwrap_body_envelope(data)

    @model_validator(mode="after")
    def _require_fields(self) -> "BookingStatusUpdate":
        if not self.booking_id or not self.status:
            raise ValueError(STATUS_REQUIRED_MESSAGE)
        return self


class ProfileSummary(StrictModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ServiceSummary(StrictModel):
    title: str
    description: Optional[str] = None


class BookingResponse(StrictModel):
    """Booking with the joined display fields shown next to it."""

    id: str
    client_id: str
    freelancer_id: str
    service_id: Optional[str] = None
    start_time: str
    end_time: str
    status: str
    total_amount_cents: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    freelancer: Optional[ProfileSummary] = None
    client: Optional[ProfileSummary] = None
    service: Optional[ServiceSummary] = None


class BookingEnvelope(SuccessEnvelope):
    booking: BookingResponse
    message: Optional[str] = None


class BookingListEnvelope(SuccessEnvelope):
    bookings: List[BookingResponse]
