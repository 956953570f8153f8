# freelance_booking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.notification_service import NotificationService
from .database import get_db


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session
        notification_service: Notification dispatcher sharing the request session
        availability_service: Availability service sharing the request session

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        notification_service=notification_service,
        availability_service=availability_service,
    )
