"""Notification aggregate: an in-app message addressed to one user."""

from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all

INBOX_SIZE = 50


class NotificationType(Enum):
    ORDER = "Order"
    PAYMENT = "Payment"
    SHIPPING = "Shipping"
    PROMOTION = "Promotion"
    SYSTEM = "System"


@storefront.aggregate
class Notification:
    user_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    message = Text(required=True)
    type = String(choices=NotificationType, default=NotificationType.SYSTEM.value)
    is_read = Boolean(default=False)
    created_at = DateTime(default=utcnow)

    def mark_read(self):
        self.is_read = True


@storefront.repository(part_of=Notification)
class NotificationRepository:
    def inbox(self, user_id, limit: int = INBOX_SIZE) -> list:
        query = self._dao.query.filter(user_id=str(user_id)).order_by("-created_at")
        return query.limit(limit).all().items

    def unread_for(self, user_id) -> list:
        return fetch_all(self._dao.query.filter(user_id=str(user_id), is_read=False))
