"""Tests for the Notification aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.notifications.notification import Notification, NotificationType


def test_defaults():
    notification = Notification(user_id="user-1", title="Hello", message="Hi there")

    assert notification.type == NotificationType.SYSTEM.value
    assert notification.is_read is False
    assert notification.created_at is not None


def test_mark_read():
    notification = Notification(user_id="user-1", title="Hello", message="Hi there")
    notification.mark_read()
    assert notification.is_read is True


def test_unknown_type_is_rejected():
    with pytest.raises(ValidationError):
        Notification(user_id="user-1", title="Hello", message="Hi there", type="Carrier Pigeon")
