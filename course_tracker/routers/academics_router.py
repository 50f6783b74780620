# /course-tracker/course_tracker/routers/academics_router.py

"""
CRUD endpoints for the reference data. Cohorts, classes, modules and modes
expose the same five endpoints, so one router is built per entity from its
contracts and mounted under its own prefix in `main.py`.
"""

from typing import List, Type

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from ..models import academic_model
from ..models.user_model import Caller
from ..services import academic_service, database_service
from .deps import get_current_caller


def build_router(entity: str, create_model: Type[BaseModel], update_model: Type[BaseModel], read_model: Type[BaseModel]) -> APIRouter:
    router = APIRouter()
    label = entity.capitalize()

    @router.post("", response_model=read_model, status_code=status.HTTP_201_CREATED, summary=f"Create a {label}")
    def create(
        payload: create_model,
        caller: Caller = Depends(get_current_caller),
        db: database_service.DatabaseService = Depends(database_service.get_db_service),
    ):
        return academic_service.create_entity(entity, payload, caller=caller, db=db)

    @router.get("", response_model=List[read_model], summary=f"List {label} Records")
    def list_all(
        active_only: bool = False,
        caller: Caller = Depends(get_current_caller),
        db: database_service.DatabaseService = Depends(database_service.get_db_service),
    ):
        return academic_service.list_entities(entity, caller=caller, db=db, active_only=active_only)

    @router.get("/{entity_id}", response_model=read_model, summary=f"Get a {label}")
    def get_one(
        entity_id: int,
        caller: Caller = Depends(get_current_caller),
        db: database_service.DatabaseService = Depends(database_service.get_db_service),
    ):
        return academic_service.get_entity(entity, entity_id, caller=caller, db=db)

    @router.patch("/{entity_id}", response_model=read_model, summary=f"Update a {label}")
    def update(
        entity_id: int,
        payload: update_model,
        caller: Caller = Depends(get_current_caller),
        db: database_service.DatabaseService = Depends(database_service.get_db_service),
    ):
        return academic_service.update_entity(entity, entity_id, payload, caller=caller, db=db)

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete a {label}")
    def delete(
        entity_id: int,
        caller: Caller = Depends(get_current_caller),
        db: database_service.DatabaseService = Depends(database_service.get_db_service),
    ):
        academic_service.delete_entity(entity, entity_id, caller=caller, db=db)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


cohorts_router = build_router("cohort", academic_model.CohortCreate, academic_model.CohortUpdate, academic_model.Cohort)
classes_router = build_router("class", academic_model.ClassCreate, academic_model.ClassUpdate, academic_model.Class)
modules_router = build_router("module", academic_model.ModuleCreate, academic_model.ModuleUpdate, academic_model.Module)
modes_router = build_router("mode", academic_model.ModeCreate, academic_model.ModeUpdate, academic_model.Mode)
