# /course-tracker/course_tracker/db/models/notification_models.py

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func

from ..base_class import Base, enum_check

NOTIFICATION_TYPES = ("reminder", "alert", "info", "warning", "activity_submitted")


class Notification(Base):
    """
    SQLAlchemy model for an in-app notification addressed to one user.

    Rows are only ever written by the notification consumer in response to a
    triggering event, never by a public create endpoint.
    """
    __table_args__ = (
        CheckConstraint(enum_check("type", NOTIFICATION_TYPES), name="ck_notifications_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # `metadata` is reserved on declarative classes.
    payload = Column("metadata", JSON, nullable=False, default=dict)
