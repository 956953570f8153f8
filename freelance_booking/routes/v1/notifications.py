# freelance_booking/routes/v1/notifications.py
"""Notification inbox routes - API v1."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies.auth import AuthenticatedUser, get_current_user
from ...api.dependencies.services import get_notification_service
from ...schemas.notifications import (
    NotificationCreate,
    NotificationEnvelope,
    NotificationListResponse,
    NotificationResponse,
    NotificationStatusResponse,
)
from ...services.notification_service import NotificationService
from .bookings import parse_body

router = APIRouter(tags=["notifications-v1"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: int | None = Query(None, ge=1, le=100),
    unread_only: bool = Query(False),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List notifications for the current user, newest first."""
    notifications, unread_count = service.list_notifications(
        current_user.user_id, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n.to_dict()) for n in notifications],
        unread_count=unread_count,
    )


@router.post("", response_model=NotificationEnvelope, status_code=status.HTTP_201_CREATED)
def send_notification(
    payload: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationEnvelope:
    """Create a notification for any user; the payload must match its type."""
    data = parse_body(NotificationCreate, payload)
    notification = service.notify(data.user_id, data.type, data.payload)
    service.log_operation(
        "send_notification",
        sender_id=current_user.user_id,
        user_id=data.user_id,
        type=data.type,
    )
    return NotificationEnvelope(
        notification=NotificationResponse.model_validate(notification.to_dict()),
        message="Notification sent successfully",
    )


@router.post("/read-all", response_model=NotificationStatusResponse)
def mark_all_notifications_read(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationStatusResponse:
    """Mark all notifications as read."""
    count = service.mark_all_as_read(current_user.user_id)
    return NotificationStatusResponse(
        message=f"Marked {count} notifications as read", updated=count
    )


@router.post("/{notification_id}/read", response_model=NotificationEnvelope)
def mark_notification_read(
    notification_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationEnvelope:
    """Mark a single notification as read."""
    notification = service.mark_as_read(current_user.user_id, notification_id)
    return NotificationEnvelope(
        notification=NotificationResponse.model_validate(notification.to_dict()),
        message="Notification marked as read",
    )
