# /course-tracker/course_tracker/routers/full_creation_router.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..models import full_record_model
from ..models.user_model import Caller
from ..services import composer_service, database_service
from .deps import get_optional_caller

router = APIRouter()


@router.post("/full-activity", response_model=full_record_model.FullRecord, status_code=status.HTTP_201_CREATED, summary="Create User, Role Record, Offering and Activity Together")
def create_full_activity_record(
    request: full_record_model.FullRecordCreate,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return composer_service.create_full_record(request, db=db, caller=caller)
