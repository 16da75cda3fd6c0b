"""FastAPI endpoints for the authenticated user's notification inbox."""

from datetime import datetime

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from pydantic import BaseModel

from storefront.identity.user import User
from storefront.notifications.notification import Notification
from storefront.notifications.reading import MarkAllNotificationsRead, MarkNotificationRead
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import get_current_user

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime | None = None


@router.get("", response_model=ApiResponse[list[NotificationResponse]])
async def list_notifications(user: User = Depends(get_current_user)):
    notifications = current_domain.repository_for(Notification).inbox(user.id)
    return ok(
        [
            NotificationResponse(
                id=str(notification.id),
                title=notification.title,
                message=notification.message,
                type=notification.type,
                is_read=notification.is_read,
                created_at=notification.created_at,
            )
            for notification in notifications
        ]
    )


@router.put("/mark-all-read", response_model=ApiResponse[int])
@router.put("/read-all", response_model=ApiResponse[int])
async def mark_all_read(user: User = Depends(get_current_user)):
    marked = current_domain.process(MarkAllNotificationsRead(user_id=str(user.id)), asynchronous=False)
    return ok(marked, "All notifications marked as read")


@router.put("/{notification_id}/read", response_model=ApiResponse[bool])
async def mark_read(notification_id: str, user: User = Depends(get_current_user)):
    command = MarkNotificationRead(notification_id=notification_id, user_id=str(user.id))
    current_domain.process(command, asynchronous=False)
    return ok(True, "Notification marked as read")
