# 🔹 FILE: jobportal/services/notifications.py
import logging
from typing import Iterable, List

from .. import results
from ..gateway import Gateway
from ..models import Notification, NotificationType
from ..results import Result, fail, ok

logger = logging.getLogger(__name__)

FILTER_ALL = "all"
FILTER_UNREAD = "unread"


def notify(gateway: Gateway, user_id, title: str, message: str, type=NotificationType.INFO) -> Result:
    created = gateway.insert(
        Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=getattr(type, "value", type),
        )
    )
    if created.error:
        logger.error("[NOTIFY] Could not notify %s (%s): %s", user_id, title, created.error)
    return created


def list_notifications(gateway: Gateway, user_id, only_unread: bool = False) -> Result:
    conditions = [Notification.user_id == user_id]
    if only_unread:
        conditions.append(Notification.read == False)  # noqa: E712
    return gateway.select(Notification, *conditions, order_by=(Notification.created_at.desc(),))


def filter_notifications(notifications: Iterable[Notification], mode: str = FILTER_ALL) -> List[Notification]:
    if mode == FILTER_UNREAD:
        return [n for n in notifications if not n.read]
    return list(notifications)


def unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.read)


def _owned(gateway: Gateway, user_id, notification_id) -> Result:
    found = gateway.get(Notification, notification_id)
    if found.error:
        return found
    if found.data.user_id != user_id:
        # someone else's notification looks the same as a missing one
        return fail(results.NOT_FOUND, "Notification not found")
    return found


def mark_as_read(gateway: Gateway, user_id, notification_id) -> Result:
    found = _owned(gateway, user_id, notification_id)
    if found.error:
        return found
    updated = gateway.update(Notification, notification_id, read=True)
    if updated.error:
        logger.error("[NOTIFY] Error marking notification as read: %s", updated.error)
    return updated


def mark_all_as_read(gateway: Gateway, user_id) -> Result:
    """Flag every unread notification of the user; data = how many changed."""
    unread = list_notifications(gateway, user_id, only_unread=True)
    if unread.error:
        return unread
    unread_ids = [n.id for n in unread.data]
    if not unread_ids:
        return ok(0)
    updated = gateway.update_in(Notification, unread_ids, read=True)
    if updated.error:
        logger.error("[NOTIFY] Error marking all notifications as read: %s", updated.error)
    return updated


def delete_notification(gateway: Gateway, user_id, notification_id) -> Result:
    found = _owned(gateway, user_id, notification_id)
    if found.error:
        return found
    deleted = gateway.delete(Notification, notification_id)
    if deleted.error:
        logger.error("[NOTIFY] Error deleting notification: %s", deleted.error)
    return deleted
