# /course-tracker/course_tracker/services/offering_service.py

"""
Business logic for course offerings: the allocation of a facilitator to
deliver one module to one class and cohort, in one mode, for one trimester
and intake.
"""

import logging

from ..core.errors import NotFoundError, ReferentialIntegrityError
from ..models import offering_model
from ..models.common_model import Page
from ..models.user_model import Caller
from .authorization_service import Operation, ResourceType, ensure_record_visible, resolve_scope
from .database_service import DatabaseService
from .validation_service import ConsistencyEnforcer

logger = logging.getLogger(__name__)

FILTER_COLUMNS = ("trimester", "cohort_id", "intake_period", "mode_id", "is_active")


def load_offering(offering_id: int, db: DatabaseService):
    offering = db.get_offering_by_id(offering_id)
    if offering is None:
        raise NotFoundError(f"Course offering {offering_id} not found.")
    return offering


def create_offering(
    offering_data: offering_model.OfferingCreate,
    caller: Caller,
    db: DatabaseService,
) -> offering_model.CourseOffering:
    resolve_scope(caller, ResourceType.OFFERING, Operation.CREATE, db)
    with db.transaction():
        result = ConsistencyEnforcer(db).validate("offering", offering_data)
        offering = db.add_offering(result.data)
    logger.info("Created course offering %s for facilitator %s", offering.id, offering.facilitator_id)
    return offering_model.CourseOffering.model_validate(offering)


def get_offering(offering_id: int, caller: Caller, db: DatabaseService) -> offering_model.CourseOffering:
    scope = resolve_scope(caller, ResourceType.OFFERING, Operation.READ, db)
    offering = load_offering(offering_id, db)
    ensure_record_visible(scope, offering)
    return offering_model.CourseOffering.model_validate(offering)


def list_offerings(
    filters: offering_model.OfferingFilter,
    caller: Caller,
    db: DatabaseService,
) -> Page[offering_model.CourseOffering]:
    """
    Lists offerings matching the filters. A facilitator's listing is always
    narrowed to their own offerings and a student's to their cohort, whatever
    filters are passed.
    """
    scope = resolve_scope(caller, ResourceType.OFFERING, Operation.LIST, db)
    values = filters.model_dump(include=set(FILTER_COLUMNS))
    values = {k: (v.value if hasattr(v, "value") else v) for k, v in values.items()}
    if scope.is_manager:
        values["facilitator_id"] = filters.facilitator_id

    rows, total = db.list_offerings(
        values, filters.offset, filters.limit,
        facilitator_id=scope.facilitator_id, cohort_id=scope.cohort_id,
    )
    items = [offering_model.CourseOffering.model_validate(o) for o in rows]
    return Page[offering_model.CourseOffering].build(items, total, filters)


def update_offering(
    offering_id: int,
    update: offering_model.OfferingUpdate,
    caller: Caller,
    db: DatabaseService,
) -> offering_model.CourseOffering:
    resolve_scope(caller, ResourceType.OFFERING, Operation.UPDATE, db)
    with db.transaction():
        offering = load_offering(offering_id, db)
        result = ConsistencyEnforcer(db).validate("offering", update, existing=offering)
        db.update_offering(offering, result.data)
    return offering_model.CourseOffering.model_validate(offering)


def delete_offering(offering_id: int, caller: Caller, db: DatabaseService) -> None:
    resolve_scope(caller, ResourceType.OFFERING, Operation.DELETE, db)
    with db.transaction():
        offering = load_offering(offering_id, db)
        activities = db.count_activities_for_offering(offering.id)
        if activities:
            raise ReferentialIntegrityError(
                f"Course offering {offering_id} still has {activities} activity record(s). Deactivate it instead."
            )
        db.delete_offering(offering)
    logger.info("Deleted course offering %s", offering_id)
