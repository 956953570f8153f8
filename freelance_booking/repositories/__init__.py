# freelance_booking/repositories/__init__.py
"""
Repository Pattern Implementation for the booking core

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- RepositoryFactory: Factory for creating repository instances
- BookingRepository: Booking reads and the conditional status update
- ConflictCheckerRepository: Overlap queries against active bookings
- NotificationRepository: Inbox entries and booking_request retraction
- AvailabilityRepository: Advisory availability slots

Usage:
    from freelance_booking.repositories import RepositoryFactory

    repository = RepositoryFactory.create_conflict_checker_repository(db)
    overlapping = repository.get_overlapping_bookings(freelancer_id, start, end)
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .notification_repository import NotificationRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "ConflictCheckerRepository",
    "NotificationRepository",
    "RepositoryFactory",
]
