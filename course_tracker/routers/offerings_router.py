# /course-tracker/course_tracker/routers/offerings_router.py

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import StreamingResponse

from ..models import activity_model, offering_model
from ..models.common_model import Page
from ..models.user_model import Caller
from ..services import database_service, offering_service, report_service
from .deps import get_current_caller

router = APIRouter()

# --- OFFERING COLLECTION ENDPOINTS (/api/courses/offerings) ---

@router.post("/offerings", response_model=offering_model.CourseOffering, status_code=status.HTTP_201_CREATED, summary="Create a Course Offering")
def create_offering(
    offering_create: offering_model.OfferingCreate,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return offering_service.create_offering(offering_create, caller=caller, db=db)

@router.get("/offerings", response_model=Page[offering_model.CourseOffering], summary="List Course Offerings")
def list_offerings(
    filters: offering_model.OfferingFilter = Depends(),
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return offering_service.list_offerings(filters, caller=caller, db=db)

# --- INDIVIDUAL OFFERING ENDPOINTS (/api/courses/offerings/{offering_id}) ---

@router.get("/offerings/{offering_id}", response_model=offering_model.CourseOffering, summary="Get a Course Offering")
def get_offering(
    offering_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return offering_service.get_offering(offering_id, caller=caller, db=db)

@router.patch("/offerings/{offering_id}", response_model=offering_model.CourseOffering, summary="Update a Course Offering")
def update_offering(
    offering_id: int,
    offering_update: offering_model.OfferingUpdate,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return offering_service.update_offering(offering_id, offering_update, caller=caller, db=db)

@router.delete("/offerings/{offering_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Course Offering")
def delete_offering(
    offering_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    offering_service.delete_offering(offering_id, caller=caller, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- REPORTS ---

@router.get("/offerings/{offering_id}/summary", response_model=activity_model.OfferingActivitySummary, summary="Summarize Weekly Activity")
def summarize_offering(
    offering_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return report_service.summarize_offering_activity(offering_id, caller=caller, db=db)

@router.get("/offerings/{offering_id}/export", summary="Export Activity Records as CSV", response_class=StreamingResponse)
def export_offering_activities(
    offering_id: int,
    caller: Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    csv_string = report_service.export_activities_as_csv(offering_id, caller=caller, db=db)
    file_name = f"activities_offering_{offering_id}.csv"
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={file_name}"})
