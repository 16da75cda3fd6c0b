import structlog
from protean.utils.globals import current_domain

from storefront.notifications.notification import Notification, NotificationType

logger = structlog.get_logger(__name__)


def notify(user_id, title: str, message: str, notification_type: NotificationType) -> str:
    """Store a notification for ``user_id`` and return its id."""
    notification = Notification(
        user_id=str(user_id),
        title=title,
        message=message,
        type=notification_type.value,
    )
    current_domain.repository_for(Notification).add(notification)
    logger.info("notification_created", user_id=str(user_id), title=title, type=notification_type.value)
    return str(notification.id)
