# freelance_booking/routes/v1/availability.py
"""Availability slot routes - API v1."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies.auth import AuthenticatedUser, get_current_user
from ...api.dependencies.services import get_availability_service
from ...schemas.availability import (
    AvailabilitySlotCreate,
    AvailabilitySlotEnvelope,
    AvailabilitySlotListEnvelope,
    AvailabilitySlotResponse,
)
from ...schemas.base import SuccessEnvelope
from ...services.availability_service import AvailabilityService
from .bookings import parse_body

router = APIRouter(tags=["availability-v1"])


@router.get("", response_model=AvailabilitySlotListEnvelope)
def list_slots(
    freelancer_id: str | None = Query(None, description="Defaults to the caller"),
    upcoming_only: bool = Query(True),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotListEnvelope:
    slots = service.list_slots(freelancer_id or current_user.user_id, upcoming_only=upcoming_only)
    return AvailabilitySlotListEnvelope(
        slots=[AvailabilitySlotResponse.model_validate(s.to_dict()) for s in slots]
    )


@router.post("", response_model=AvailabilitySlotEnvelope, status_code=status.HTTP_201_CREATED)
def create_slot(
    payload: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotEnvelope:
    data = parse_body(AvailabilitySlotCreate, payload)
    slot = service.create_slot(current_user.user_id, data.start_time, data.end_time)
    return AvailabilitySlotEnvelope(
        slot=AvailabilitySlotResponse.model_validate(slot.to_dict()),
        message="Availability slot created",
    )


@router.delete("/{slot_id}", response_model=SuccessEnvelope)
def delete_slot(
    slot_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
) -> SuccessEnvelope:
    service.delete_slot(current_user.user_id, slot_id)
    return SuccessEnvelope()
