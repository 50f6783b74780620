# /course-tracker/course_tracker/services/composer_service.py

"""
The transactional composer: creates a user, their role record, a course
offering and its first activity record in one atomic unit.

Each step is validated on its own, after the ids generated by the earlier
steps have been injected into its payload. The first failing step aborts the
whole unit: the transaction is rolled back, so none of the four rows
survives, and that step's error is re-raised unchanged.

Writes made here do not emit notification intents.
"""

import logging
from typing import Optional

from ..models.activity_model import ActivityRecord
from ..models.full_record_model import FullRecord, FullRecordCreate
from ..models.offering_model import CourseOffering
from ..models.user_model import Caller, Role, User
from .activity_service import write_submission
from .authorization_service import resolve_composite_scope
from .database_service import DatabaseService
from .user_service import add_user_with_profile, to_profile
from .validation_service import ConsistencyEnforcer

logger = logging.getLogger(__name__)


def create_full_record(request: FullRecordCreate, db: DatabaseService, caller: Optional[Caller] = None) -> FullRecord:
    resolve_composite_scope(caller, db)

    with db.transaction():
        # Step 1 and 2: the user, then the role record that matches its role.
        user, record = add_user_with_profile(request.user_data, request.role_data, db)

        # Step 3: a new facilitator delivers the offering being created.
        offering_payload = dict(request.offering_data)
        if user.role == Role.FACILITATOR.value:
            offering_payload["facilitator_id"] = record.id
        offering_result = ConsistencyEnforcer(db).validate("offering", offering_payload)
        offering = db.add_offering(offering_result.data)

        # Step 4: the first activity record of that offering.
        activity, _ = write_submission({**request.activity_data, "allocation_id": offering.id}, db)

    logger.info(
        "Created full record: user %s, %s record %s, offering %s, activity %s",
        user.id, user.role, record.id, offering.id, activity.id,
    )
    return FullRecord(
        user=User.model_validate(user),
        profile=to_profile(user.role, record),
        offering=CourseOffering.model_validate(offering),
        activity=ActivityRecord.model_validate(activity),
    )
