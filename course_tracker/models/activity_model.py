# /course-tracker/course_tracker/models/activity_model.py

"""
Pydantic contracts for weekly activity tracker submissions.

Status fields on `ActivitySubmission` default to "unset" rather than to
`Not Started`: a re-submission for a week that already has a record only
overwrites the fields it actually carries, and the table defaults fill in
the rest on first insert.
"""

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from .common_model import PageParams


class ActivityStatus(str, Enum):
    DONE = "Done"
    PENDING = "Pending"
    NOT_STARTED = "Not Started"


class ActivitySubmission(BaseModel):
    allocation_id: int = Field(..., ge=1, description="The id of the course offering this report belongs to.")
    week_number: int = Field(..., ge=1, le=52)
    attendance: Optional[List[StrictBool]] = Field(default=None, description="One entry per session, in order.")
    formative_one_grading: Optional[ActivityStatus] = None
    formative_two_grading: Optional[ActivityStatus] = None
    summative_grading: Optional[ActivityStatus] = None
    course_moderation: Optional[ActivityStatus] = None
    intranet_sync: Optional[ActivityStatus] = None
    grade_book_status: Optional[ActivityStatus] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    due_date: Optional[datetime.date] = None


class ActivityUpdate(BaseModel):
    """Partial update of an existing record. Its (allocation, week) key is fixed."""
    attendance: Optional[List[StrictBool]] = None
    formative_one_grading: Optional[ActivityStatus] = None
    formative_two_grading: Optional[ActivityStatus] = None
    summative_grading: Optional[ActivityStatus] = None
    course_moderation: Optional[ActivityStatus] = None
    intranet_sync: Optional[ActivityStatus] = None
    grade_book_status: Optional[ActivityStatus] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    due_date: Optional[datetime.date] = None


class ActivityRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    allocation_id: int
    week_number: int
    attendance: List[bool] = Field(default_factory=list)
    formative_one_grading: ActivityStatus
    formative_two_grading: ActivityStatus
    summative_grading: ActivityStatus
    course_moderation: ActivityStatus
    intranet_sync: ActivityStatus
    grade_book_status: ActivityStatus
    notes: Optional[str] = None
    submitted_at: Optional[datetime.datetime] = None
    due_date: Optional[datetime.date] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class SubmissionResult(BaseModel):
    """The stored record plus whether this call inserted it or merged into it."""
    model_config = ConfigDict(frozen=True)

    activity: ActivityRecord
    created: bool


class ActivityFilter(PageParams):
    allocation_id: Optional[int] = Field(default=None, ge=1)
    week_number: Optional[int] = Field(default=None, ge=1, le=52)
    # Managers only; ignored for facilitators.
    facilitator_id: Optional[int] = Field(default=None, ge=1)


class WeeklySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    week_number: int
    attendance_rate: Optional[float] = None
    completion_rate: float
    submitted_at: Optional[datetime.datetime] = None


class OfferingActivitySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    allocation_id: int
    weeks_reported: int
    overall_completion_rate: float
    overall_attendance_rate: Optional[float] = None
    weeks: List[WeeklySummary] = Field(default_factory=list)
