# /course-tracker/course_tracker/models/full_record_model.py

"""
Contracts for the composite "full record" creation: a user, their role
record, a course offering and its first activity report, created together.

Each step payload is kept as a raw mapping here and validated by the
consistency enforcer when its step runs, so that ids generated by earlier
steps can be injected first (`user_id`, `facilitator_id`, `allocation_id`).
"""

from typing import Any, Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .activity_model import ActivityRecord
from .offering_model import CourseOffering
from .user_model import RoleProfile, User


class FullRecordCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_data: Dict[str, Any] = Field(..., alias="userData")
    # Older clients send the role payload as "facilitatorData".
    role_data: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("roleData", "facilitatorData", "role_data"),
    )
    offering_data: Dict[str, Any] = Field(..., alias="courseOfferingData")
    activity_data: Dict[str, Any] = Field(..., alias="activityTrackerData")


class FullRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: User
    profile: RoleProfile
    offering: CourseOffering
    activity: ActivityRecord
