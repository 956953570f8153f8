"""Repository for in-app notification inbox entries."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.notification import Notification, NotificationType
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Data access for notification inbox entries."""

    def __init__(self, db: Session) -> None:
        super().__init__(db, Notification)

    def create_notification(
        self, user_id: str, type: str, payload: Dict[str, Any]
    ) -> Notification:
        notification = Notification(user_id=user_id, type=type, payload=payload, read=False)
        self.db.add(notification)
        self.db.flush()
        self.db.refresh(notification)
        return notification

    def get_user_notifications(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        query = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return cast(List[Notification], query.all())

    def get_unread_count(self, user_id: str) -> int:
        count = (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .scalar()
        )
        return int(count or 0)

    def get_for_user(self, user_id: str, notification_id: str) -> Optional[Notification]:
        return cast(
            Optional[Notification],
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first(),
        )

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({"read": True}, synchronize_session="fetch")
        )
        return int(updated or 0)

    def delete_booking_requests(self, user_id: str, booking_id: str) -> int:
        """
        Delete the user's ``booking_request`` entries that reference ``booking_id``.

        The payload match runs in Python so it behaves the same on JSON
        (SQLite) and JSONB (PostgreSQL) columns.
        """
        candidates = (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.type == NotificationType.BOOKING_REQUEST.value,
            )
            .all()
        )
        stale_ids = [
            n.id for n in candidates if (n.payload or {}).get("booking_id") == booking_id
        ]
        if not stale_ids:
            return 0
        deleted = (
            self.db.query(Notification)
            .filter(Notification.id.in_(stale_ids))
            .delete(synchronize_session="fetch")
        )
        return int(deleted or 0)
