# /course-tracker/course_tracker/services/notification_service.py

"""
The notification trigger and the in-app notification inbox.

Producer side: after an activity record is written through the normal write
path, `NotificationTrigger.activity_submitted` places one `NotificationIntent`
on a Redis list. Delivery is best-effort. A slow or unreachable queue is
logged and otherwise ignored, because the activity write it reports on has
already been committed.

Consumer side: `record_intent` turns one intent into in-app notifications for
the active managers. The delivery worker (`workers/notification_worker.py`)
pops intents off the same list and hands them to it.
"""

import json
import logging
from typing import List, Optional, Protocol

import redis

from .. import config
from ..core.errors import NotFoundError
from ..models.common_model import Page
from ..models.notification_model import Notification, NotificationFilter, NotificationIntent
from ..models.user_model import Caller
from .authorization_service import Operation, ResourceType, resolve_scope
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


# --- Queue ---

class NotificationQueue(Protocol):
    def push(self, intent: NotificationIntent) -> None: ...


class RedisNotificationQueue:
    """A FIFO of JSON-encoded intents stored in one Redis list."""

    def __init__(self, client: redis.Redis, queue_name: str = config.NOTIFICATION_QUEUE_NAME):
        self.client = client
        self.queue_name = queue_name

    @classmethod
    def from_url(cls, url: str, queue_name: str = config.NOTIFICATION_QUEUE_NAME,
                 timeout: Optional[float] = config.NOTIFICATION_TIMEOUT_SECONDS) -> "RedisNotificationQueue":
        client = redis.Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)
        return cls(client, queue_name)

    def push(self, intent: NotificationIntent) -> None:
        self.client.rpush(self.queue_name, intent.model_dump_json())

    def pop(self, timeout: int = 5) -> Optional[NotificationIntent]:
        """Blocks up to `timeout` seconds for the next intent."""
        item = self.client.blpop([self.queue_name], timeout=timeout)
        if item is None:
            return None
        _, raw = item
        return NotificationIntent.model_validate(json.loads(raw))


class NotificationTrigger:
    def __init__(self, queue: Optional[NotificationQueue]):
        self.queue = queue

    def activity_submitted(self, facilitator_id: int, activity_id: int, week_number: int) -> bool:
        """
        Emits one `activity_submitted` intent. Returns whether it was queued;
        never raises.
        """
        intent = NotificationIntent(facilitator_id=facilitator_id, activity_id=activity_id, week_number=week_number)
        if self.queue is None:
            logger.debug("No notification queue configured; dropping intent for activity %s", activity_id)
            return False
        try:
            self.queue.push(intent)
        except Exception:
            logger.warning("Failed to enqueue notification for activity %s", activity_id, exc_info=True)
            return False
        logger.info("Queued activity_submitted notification for activity %s (week %s)", activity_id, week_number)
        return True


_default_trigger: Optional[NotificationTrigger] = None


def get_notification_trigger() -> NotificationTrigger:
    """FastAPI dependency returning the process-wide trigger."""
    global _default_trigger
    if _default_trigger is None:
        queue = RedisNotificationQueue.from_url(config.REDIS_URL) if config.REDIS_URL else None
        _default_trigger = NotificationTrigger(queue)
    return _default_trigger


# --- Inbox ---

def record_intent(intent: NotificationIntent, db: DatabaseService) -> List[Notification]:
    """
    Persists one in-app notification per active manager for a delivered
    intent. Runs in its own transaction.
    """
    facilitator = db.get_facilitator_by_id(intent.facilitator_id)
    user = db.get_user_by_id(facilitator.user_id) if facilitator is not None else None
    who = f"{user.first_name} {user.last_name}" if user is not None else f"Facilitator {intent.facilitator_id}"

    created = []
    with db.transaction():
        for manager_user_id in db.get_active_manager_user_ids():
            created.append(db.add_notification({
                "user_id": manager_user_id,
                "type": intent.type,
                "title": "Activity report submitted",
                "message": f"{who} submitted the activity report for week {intent.week_number}.",
                "payload": intent.model_dump(),
            }))
    logger.info("Recorded %d notifications for activity %s", len(created), intent.activity_id)
    return [Notification.model_validate(n) for n in created]


def list_notifications(caller: Caller, filters: NotificationFilter, db: DatabaseService) -> Page[Notification]:
    scope = resolve_scope(caller, ResourceType.NOTIFICATION, Operation.LIST, db)
    rows, total = db.list_notifications_for_user(
        scope.user_id,
        filters.is_read,
        filters.type.value if filters.type else None,
        filters.offset,
        filters.limit,
    )
    return Page[Notification].build([Notification.model_validate(r) for r in rows], total, filters)


def mark_notification_read(notification_id: int, caller: Caller, db: DatabaseService) -> Notification:
    scope = resolve_scope(caller, ResourceType.NOTIFICATION, Operation.UPDATE, db)
    with db.transaction():
        notification = db.get_notification_for_user(notification_id, scope.user_id)
        if notification is None:
            raise NotFoundError(f"Notification {notification_id} not found.")
        db.mark_notification_read(notification)
    return Notification.model_validate(notification)
