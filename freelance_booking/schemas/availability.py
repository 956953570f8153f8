"""Schemas for freelancer availability slots."""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator

from ..utils.time_helpers import ensure_utc
from .base import StandardizedModel, StrictModel, SuccessEnvelope


class AvailabilitySlotCreate(StandardizedModel):
    start_time: datetime = Field(validation_alias=AliasChoices("start_time", "startTime"))
    end_time: datetime = Field(validation_alias=AliasChoices("end_time", "endTime"))

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class AvailabilitySlotResponse(StrictModel):
    id: str
    freelancer_id: str
    start_time: str
    end_time: str
    is_booked: bool
    created_at: Optional[str] = None


class AvailabilitySlotEnvelope(SuccessEnvelope):
    slot: AvailabilitySlotResponse
    message: Optional[str] = None


class AvailabilitySlotListEnvelope(SuccessEnvelope):
    slots: List[AvailabilitySlotResponse]
