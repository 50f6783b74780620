# /course-tracker/course_tracker/services/activity_service.py

"""
Business logic for weekly activity tracker records.

A facilitator reports on each week of an offering once; reporting the same
week again updates that week's record in place. `submit_activity` is
therefore an upsert keyed on (allocation_id, week_number), and returns
whether the call created the record or merged into it.

Every successful submit or update emits exactly one `activity_submitted`
notification intent, after the write has been committed.
"""

import datetime
import logging
from typing import Tuple

from ..core.errors import ConstraintViolation, NotFoundError
from ..models import activity_model
from ..models.common_model import Page
from ..models.user_model import Caller
from .authorization_service import Operation, ResourceType, ensure_record_visible, resolve_scope
from .database_service import DatabaseService
from .notification_service import NotificationTrigger
from .validation_service import ConsistencyEnforcer

logger = logging.getLogger(__name__)

WEEK_KEY = "allocation_id,week_number"


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def write_submission(submission, db: DatabaseService) -> Tuple:
    """
    Validates and writes one submission as an insert or a merge. Must run
    inside `db.transaction()`. Returns (activity row, created).
    """
    result = ConsistencyEnforcer(db).validate("activity", submission)
    if result.operation == "merge":
        activity = db.get_activity_by_id(result.target_id)
        changes = {k: v for k, v in result.data.items() if k not in ("allocation_id", "week_number")}
        db.update_activity(activity, {**changes, "submitted_at": _now()})
        return activity, False
    return db.add_activity({**result.data, "submitted_at": _now()}), True


def _load_visible(activity_id: int, scope, db: DatabaseService):
    activity = db.get_activity_by_id(activity_id)
    if activity is None:
        raise NotFoundError(f"Activity record {activity_id} not found.")
    ensure_record_visible(scope, db.get_offering_by_id(activity.allocation_id))
    return activity


def submit_activity(
    submission: activity_model.ActivitySubmission,
    caller: Caller,
    db: DatabaseService,
    trigger: NotificationTrigger,
) -> activity_model.SubmissionResult:
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.CREATE, db)
    offering = db.get_offering_by_id(submission.allocation_id)
    if offering is not None:
        ensure_record_visible(scope, offering)

    try:
        with db.transaction():
            activity, created = write_submission(submission, db)
    except ConstraintViolation as e:
        if e.field != WEEK_KEY:
            raise
        # Another request inserted this week between our lookup and our insert.
        logger.info("Concurrent submission for offering %s week %s; retrying as merge",
                    submission.allocation_id, submission.week_number)
        with db.transaction():
            activity, created = write_submission(submission, db)

    record = activity_model.ActivityRecord.model_validate(activity)
    trigger.activity_submitted(offering.facilitator_id, record.id, record.week_number)
    return activity_model.SubmissionResult(activity=record, created=created)


def get_activity(activity_id: int, caller: Caller, db: DatabaseService) -> activity_model.ActivityRecord:
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.READ, db)
    return activity_model.ActivityRecord.model_validate(_load_visible(activity_id, scope, db))


def list_activities(
    filters: activity_model.ActivityFilter,
    caller: Caller,
    db: DatabaseService,
) -> Page[activity_model.ActivityRecord]:
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.LIST, db)
    facilitator_id = filters.facilitator_id if scope.is_manager else scope.facilitator_id
    rows, total = db.list_activities(
        filters.allocation_id, filters.week_number, filters.offset, filters.limit,
        facilitator_id=facilitator_id,
    )
    items = [activity_model.ActivityRecord.model_validate(a) for a in rows]
    return Page[activity_model.ActivityRecord].build(items, total, filters)


def update_activity(
    activity_id: int,
    update: activity_model.ActivityUpdate,
    caller: Caller,
    db: DatabaseService,
    trigger: NotificationTrigger,
) -> activity_model.ActivityRecord:
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.UPDATE, db)
    with db.transaction():
        activity = _load_visible(activity_id, scope, db)
        result = ConsistencyEnforcer(db).validate("activity", update, existing=activity)
        db.update_activity(activity, {**result.data, "submitted_at": _now()})
        facilitator_id = db.get_offering_by_id(activity.allocation_id).facilitator_id

    record = activity_model.ActivityRecord.model_validate(activity)
    trigger.activity_submitted(facilitator_id, record.id, record.week_number)
    return record


def delete_activity(activity_id: int, caller: Caller, db: DatabaseService) -> None:
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.DELETE, db)
    with db.transaction():
        db.delete_activity(_load_visible(activity_id, scope, db))
    logger.info("Deleted activity record %s", activity_id)
