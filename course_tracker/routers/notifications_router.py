# /course-tracker/course_tracker/routers/notifications_router.py

from fastapi import APIRouter, Depends

from ..models import notification_model
from ..models.common_model import Page
from ..models.user_model import Caller
from ..services import database_service, notification_service
from .deps import get_current_caller

router = APIRouter()


@router.get("", response_model=Page[notification_model.Notification], summary="List the Caller's Notifications")
def list_notifications(
    filters: notification_model.NotificationFilter = Depends(),
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return notification_service.list_notifications(caller, filters, db)

@router.put("/{notification_id}/read", response_model=notification_model.Notification, summary="Mark a Notification as Read")
def mark_notification_read(
    notification_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return notification_service.mark_notification_read(notification_id, caller, db)
