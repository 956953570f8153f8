# freelance_booking/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.

Endpoints:
    POST /                     → Create a booking (client)
    POST /status               → Update a booking's status (either party)
    GET /                      → List the caller's bookings
    GET /{booking_id}          → Get one of the caller's bookings

Bodies are read as raw JSON and parsed after authentication, so an
unauthenticated request is rejected before its body is looked at.
"""

import logging
from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, ValidationError

from ...api.dependencies.auth import AuthenticatedUser, get_current_user
from ...api.dependencies.services import get_booking_service
from ...core.exceptions import InvalidRequestException
from ...models.booking import Booking
from ...schemas.base import validation_message
from ...schemas.booking import (
    BookingCreate,
    BookingEnvelope,
    BookingListEnvelope,
    BookingResponse,
    BookingStatusUpdate,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_body(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate a raw JSON body, mapping schema errors to InvalidRequest."""
    try:
        return model.model_validate(payload if payload is not None else {})
    except ValidationError as exc:
        raise InvalidRequestException(validation_message(exc)) from exc


def _booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse.model_validate(booking.to_dict())


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    """Reserve a freelancer's time for the authenticated client."""
    data = parse_body(BookingCreate, payload)
    booking = booking_service.create_booking(
        client_id=current_user.user_id,
        freelancer_id=data.freelancer_id,
        start_time=data.start_time,
        end_time=data.end_time,
        service_id=data.service_id,
        notes=data.notes,
        client_name=current_user.display_name,
    )
    return BookingEnvelope(
        booking=_booking_response(booking), message="Booking created successfully"
    )


@router.post("/status", response_model=BookingEnvelope)
def update_booking_status(
    payload: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    """Confirm, cancel/reject or complete a booking."""
    data = parse_body(BookingStatusUpdate, payload)
    result = booking_service.update_booking_status(
        actor_id=current_user.user_id,
        booking_id=data.booking_id,
        new_status=data.status,
        notes=data.notes,
    )
    return BookingEnvelope(booking=_booking_response(result.booking), message=result.message)


@router.get("", response_model=BookingListEnvelope)
def list_bookings(
    role: Optional[str] = Query(None, description="client or freelancer"),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListEnvelope:
    bookings = booking_service.list_bookings(
        current_user.user_id, role=role, status=status_filter
    )
    return BookingListEnvelope(bookings=[_booking_response(b) for b in bookings])


@router.get("/{booking_id}", response_model=BookingEnvelope)
def get_booking(
    booking_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    booking = booking_service.get_booking(current_user.user_id, booking_id)
    return BookingEnvelope(booking=_booking_response(booking))
