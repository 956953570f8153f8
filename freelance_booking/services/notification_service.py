# freelance_booking/services/notification_service.py
"""
Notification Dispatcher for the booking core

Writes in-app inbox entries and retracts stale ``booking_request``
entries once the freelancer has answered. Every insert validates the
payload against the schema for its type.

Booking side effects go through ``notify_best_effort`` and
``retract_best_effort``: they run after the booking write has committed,
and a failure there is logged and counted, never raised.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import InvalidRequestException, NotFoundException
from ..models.notification import Notification, NotificationType
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.notification_repository import NotificationRepository
from ..schemas.base import validation_message
from ..schemas.notifications import validate_notification_content
from .base import BaseService

logger = logging.getLogger(__name__)

_KNOWN_TYPES = {t.value for t in NotificationType}


class NotificationService(BaseService):
    """Creates, lists and retracts in-app notifications."""

    def __init__(self, db: Session, repository: Optional[NotificationRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_notification_repository(db)

    @BaseService.measure_operation("notify")
    def notify(self, user_id: str, type: str, payload: Dict[str, Any]) -> Notification:
        """
        Insert an unread notification for ``user_id``.

        Raises:
            InvalidRequestException: Unknown type or payload not matching its schema
        """
        if type not in _KNOWN_TYPES:
            raise InvalidRequestException(f"Unsupported notification type: {type}")
        try:
            stored_payload = validate_notification_content(type, payload)
        except ValidationError as exc:
            raise InvalidRequestException(
                f"Invalid {type} payload: {validation_message(exc)}"
            ) from exc

        with self.transaction():
            notification = self.repository.create_notification(user_id, type, stored_payload)

        prometheus_metrics.record_notification(type, "created")
        self.logger.debug(
            "Notification created",
            extra={"user_id": user_id, "type": type, "notification_id": notification.id},
        )
        return notification

    @BaseService.measure_operation("retract_booking_request")
    def retract_booking_request(self, freelancer_id: str, booking_id: str) -> int:
        """Delete the freelancer's booking_request entries for ``booking_id``; zero is fine."""
        with self.transaction():
            deleted = self.repository.delete_booking_requests(freelancer_id, booking_id)
        if deleted:
            prometheus_metrics.record_notification(
                NotificationType.BOOKING_REQUEST.value, "retracted"
            )
        self.logger.debug(
            "Retracted booking_request notifications",
            extra={"freelancer_id": freelancer_id, "booking_id": booking_id, "deleted": deleted},
        )
        return deleted

    def notify_best_effort(
        self, user_id: str, type: str, payload: Dict[str, Any]
    ) -> Optional[Notification]:
        """notify() for post-commit side effects: failures are logged, not raised."""
        try:
            return self.notify(user_id, type, payload)
        except Exception as exc:
            prometheus_metrics.record_notification(type, "failed")
            self.logger.error(
                f"Failed to create {type} notification: {str(exc)}",
                extra={
                    "user_id": user_id,
                    "type": type,
                    "booking_id": payload.get("booking_id"),
                    "error_type": exc.__class__.__name__,
                },
            )
            return None

    def retract_best_effort(self, freelancer_id: str, booking_id: str) -> int:
        try:
            return self.retract_booking_request(freelancer_id, booking_id)
        except Exception as exc:
            prometheus_metrics.record_notification(
                NotificationType.BOOKING_REQUEST.value, "failed"
            )
            self.logger.error(
                f"Failed to retract booking_request notifications: {str(exc)}",
                extra={"freelancer_id": freelancer_id, "booking_id": booking_id},
            )
            return 0

    # Inbox

    @BaseService.measure_operation("list_notifications")
    def list_notifications(
        self, user_id: str, limit: Optional[int] = None, unread_only: bool = False
    ) -> Tuple[List[Notification], int]:
        """Newest-first inbox page plus the user's total unread count."""
        page_size = limit or settings.notification_page_size
        notifications = self.repository.get_user_notifications(
            user_id, limit=page_size, unread_only=unread_only
        )
        return notifications, self.repository.get_unread_count(user_id)

    @BaseService.measure_operation("mark_as_read")
    def mark_as_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self.repository.get_for_user(user_id, notification_id)
        if notification is None:
            raise NotFoundException("Notification not found")
        if not notification.read:
            with self.transaction():
                notification.read = True
        return notification

    @BaseService.measure_operation("mark_all_as_read")
    def mark_all_as_read(self, user_id: str) -> int:
        with self.transaction():
            updated = self.repository.mark_all_as_read(user_id)
        self.log_operation("mark_all_as_read", user_id=user_id, updated=updated)
        return updated
