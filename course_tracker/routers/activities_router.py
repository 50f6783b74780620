# /course-tracker/course_tracker/routers/activities_router.py

from fastapi import APIRouter, Depends, Response, status

from ..models import activity_model
from ..models.common_model import Page
from ..models.user_model import Caller
from ..services import activity_service, database_service
from ..services.notification_service import NotificationTrigger, get_notification_trigger
from .deps import get_current_caller

router = APIRouter()

# --- ACTIVITY COLLECTION ENDPOINTS (/api/activities) ---

@router.post("", response_model=activity_model.SubmissionResult, summary="Submit a Weekly Activity Report")
def submit_activity(
    submission: activity_model.ActivitySubmission,
    response: Response,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
    trigger: NotificationTrigger = Depends(get_notification_trigger),
):
    """Creates the week's record (201) or merges into the existing one (200)."""
    result = activity_service.submit_activity(submission, caller=caller, db=db, trigger=trigger)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return result

@router.get("", response_model=Page[activity_model.ActivityRecord], summary="List Activity Records")
def list_activities(
    filters: activity_model.ActivityFilter = Depends(),
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return activity_service.list_activities(filters, caller=caller, db=db)

# --- INDIVIDUAL ACTIVITY ENDPOINTS (/api/activities/{activity_id}) ---

@router.get("/{activity_id}", response_model=activity_model.ActivityRecord, summary="Get an Activity Record")
def get_activity(
    activity_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return activity_service.get_activity(activity_id, caller=caller, db=db)

@router.patch("/{activity_id}", response_model=activity_model.ActivityRecord, summary="Update an Activity Record")
def update_activity(
    activity_id: int,
    update: activity_model.ActivityUpdate,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
    trigger: NotificationTrigger = Depends(get_notification_trigger),
):
    return activity_service.update_activity(activity_id, update, caller=caller, db=db, trigger=trigger)

@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an Activity Record")
def delete_activity(
    activity_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    activity_service.delete_activity(activity_id, caller=caller, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
