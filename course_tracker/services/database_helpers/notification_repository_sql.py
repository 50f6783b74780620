# /course-tracker/course_tracker/services/database_helpers/notification_repository_sql.py

from typing import Dict, List, Optional, Tuple

from sqlalchemy import select

from ...db.models.notification_models import Notification
from .base_repository_sql import SQLRepository


class NotificationRepositorySQL(SQLRepository):

    def add_notification(self, record: Dict) -> Notification:
        return self._add(Notification, record)

    def get_notification_for_user(self, notification_id: int, user_id: int) -> Optional[Notification]:
        """Only returns the notification if it is addressed to `user_id`."""
        stmt = select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        return self.db.scalars(stmt).first()

    def list_notifications_for_user(
        self,
        user_id: int,
        is_read: Optional[bool],
        notification_type: Optional[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Notification], int]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if is_read is not None:
            stmt = stmt.where(Notification.is_read == is_read)
        if notification_type is not None:
            stmt = stmt.where(Notification.type == notification_type)
        return self._page(stmt.order_by(Notification.sent_at.desc(), Notification.id.desc()), offset, limit)

    def mark_read(self, notification: Notification) -> Notification:
        return self._update(notification, {"is_read": True})
