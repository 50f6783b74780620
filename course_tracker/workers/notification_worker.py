# /course-tracker/course_tracker/workers/notification_worker.py

"""
The notification delivery worker.

Pops `activity_submitted` intents off the Redis queue and records them as
in-app notifications for the managers. External delivery (email, push, SMS)
is not done here.

Run with `python -m course_tracker.workers.notification_worker`.
"""

import logging
import time
from typing import Callable, Optional

from sqlalchemy.orm import Session

from .. import config
from ..core.logging_config import setup_logging
from ..db.database import SessionLocal
from ..services.database_service import DatabaseService
from ..services.notification_service import RedisNotificationQueue, record_intent

logger = logging.getLogger(__name__)


def consume_once(queue: RedisNotificationQueue, session_factory: Callable[[], Session] = SessionLocal, timeout: int = 5) -> Optional[int]:
    """
    Handles at most one intent. Returns the number of notifications created,
    or None when the queue stayed empty for `timeout` seconds.
    """
    intent = queue.pop(timeout=timeout)
    if intent is None:
        return None
    session = session_factory()
    try:
        return len(record_intent(intent, DatabaseService(session)))
    finally:
        session.close()


def run_worker() -> None:
    setup_logging()
    if not config.REDIS_URL:
        raise SystemExit("REDIS_URL is not set; there is no queue to consume.")
    # Blocking pops need a socket that does not time out before the pop does.
    queue = RedisNotificationQueue.from_url(config.REDIS_URL, timeout=None)
    logger.info("Notification worker consuming '%s'", queue.queue_name)
    while True:
        try:
            consume_once(queue)
        except Exception:
            logger.exception("Failed to record a notification intent")
            time.sleep(1)


if __name__ == "__main__":
    run_worker()
