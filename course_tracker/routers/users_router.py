# /course-tracker/course_tracker/routers/users_router.py

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..models import user_model
from ..models.common_model import Page
from ..services import database_service, user_service
from .deps import get_current_caller

router = APIRouter()

# --- USER COLLECTION ENDPOINTS (/api/users) ---

@router.post("", response_model=user_model.RegisteredUser, status_code=status.HTTP_201_CREATED, summary="Register a User with Their Role Record")
def register_user(
    registration: user_model.UserRegistration,
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.register_user(registration, db=db, caller=caller)

@router.get("", response_model=Page[user_model.User], summary="List Users")
def list_users(
    filters: user_model.UserFilter = Depends(),
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.list_users(filters, caller=caller, db=db)

@router.get("/facilitators", response_model=List[user_model.FacilitatorSummary], summary="List Active Facilitators")
def list_facilitators(
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.list_facilitators(caller=caller, db=db)

@router.get("/me", response_model=user_model.RegisteredUser, summary="Get the Caller's Own Profile")
def get_own_profile(
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.get_user(caller.id, caller=caller, db=db)

# --- INDIVIDUAL USER ENDPOINTS (/api/users/{user_id}) ---

@router.get("/{user_id}", response_model=user_model.RegisteredUser, summary="Get a User")
def get_user(
    user_id: int,
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.get_user(user_id, caller=caller, db=db)

@router.patch("/{user_id}", response_model=user_model.User, summary="Update a User")
def update_user(
    user_id: int,
    update: user_model.UserUpdate,
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    return user_service.update_user(user_id, update, caller=caller, db=db)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a User and Their Role Record")
def delete_user(
    user_id: int,
    caller: user_model.Caller = Depends(get_current_caller),
    db: database_service.DatabaseService = Depends(database_service.get_db_service),
):
    user_service.delete_user(user_id, caller=caller, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
