# /course-tracker/course_tracker/services/academic_service.py

"""
Business logic for the reference data: cohorts, classes, modules and modes.

The four entities behave identically apart from their contracts, so each
operation takes the entity name ("cohort", "class", "module", "mode") and
looks up the matching read model. Any role may read reference data; only
managers may change it.
"""

import logging
from typing import Any, List

from ..core.errors import NotFoundError, ReferentialIntegrityError
from ..models import academic_model
from ..models.user_model import Caller
from .authorization_service import Operation, ResourceType, resolve_scope
from .database_service import DatabaseService
from .validation_service import ConsistencyEnforcer

logger = logging.getLogger(__name__)

READ_MODELS = {
    "cohort": academic_model.Cohort,
    "class": academic_model.Class,
    "module": academic_model.Module,
    "mode": academic_model.Mode,
}


def _load(entity: str, entity_id: int, db: DatabaseService):
    obj = db.get_academic(entity, entity_id)
    if obj is None:
        raise NotFoundError(f"{entity.capitalize()} {entity_id} not found.")
    return obj


def create_entity(entity: str, payload: Any, caller: Caller, db: DatabaseService):
    resolve_scope(caller, ResourceType(entity), Operation.CREATE, db)
    with db.transaction():
        result = ConsistencyEnforcer(db).validate(entity, payload)
        obj = db.add_academic(entity, result.data)
    logger.info("Created %s %s", entity, obj.id)
    return READ_MODELS[entity].model_validate(obj)


def get_entity(entity: str, entity_id: int, caller: Caller, db: DatabaseService):
    resolve_scope(caller, ResourceType(entity), Operation.READ, db)
    return READ_MODELS[entity].model_validate(_load(entity, entity_id, db))


def list_entities(entity: str, caller: Caller, db: DatabaseService, active_only: bool = False) -> List:
    resolve_scope(caller, ResourceType(entity), Operation.LIST, db)
    return [READ_MODELS[entity].model_validate(obj) for obj in db.list_academic(entity, active_only)]


def update_entity(entity: str, entity_id: int, payload: Any, caller: Caller, db: DatabaseService):
    resolve_scope(caller, ResourceType(entity), Operation.UPDATE, db)
    with db.transaction():
        obj = _load(entity, entity_id, db)
        result = ConsistencyEnforcer(db).validate(entity, payload, existing=obj)
        db.update_academic(obj, result.data)
    return READ_MODELS[entity].model_validate(obj)


def delete_entity(entity: str, entity_id: int, caller: Caller, db: DatabaseService) -> None:
    """Deletes a reference record that nothing points at any more."""
    resolve_scope(caller, ResourceType(entity), Operation.DELETE, db)
    with db.transaction():
        obj = _load(entity, entity_id, db)
        dependents = {table: n for table, n in db.count_academic_dependents(entity, entity_id).items() if n}
        if dependents:
            summary = ", ".join(f"{n} {table}" for table, n in dependents.items())
            raise ReferentialIntegrityError(f"{entity.capitalize()} {entity_id} is still referenced by {summary}.")
        db.delete_academic(obj)
    logger.info("Deleted %s %s", entity, entity_id)
