# /course-tracker/course_tracker/models/notification_model.py

import datetime
from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common_model import PageParams


class NotificationType(str, Enum):
    REMINDER = "reminder"
    ALERT = "alert"
    INFO = "info"
    WARNING = "warning"
    ACTIVITY_SUBMITTED = "activity_submitted"


class NotificationIntent(BaseModel):
    """
    The message placed on the notification queue after an activity write.
    It is a request to notify, not a notification: the delivery worker
    decides who receives it and how.
    """
    model_config = ConfigDict(frozen=True)

    type: Literal["activity_submitted"] = "activity_submitted"
    facilitator_id: int
    activity_id: int
    week_number: int


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    is_read: bool
    sent_at: Optional[datetime.datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("payload", "metadata"))


class NotificationFilter(PageParams):
    is_read: Optional[bool] = None
    type: Optional[NotificationType] = None
