# /course-tracker/course_tracker/models/offering_model.py

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import PageParams


class Trimester(str, Enum):
    ONE = "1"; TWO = "2"; THREE = "3"


class IntakePeriod(str, Enum):
    HT1 = "HT1"; HT2 = "HT2"; FT = "FT"


def _int_to_str(value):
    return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


class OfferingCreate(BaseModel):
    module_id: int = Field(..., ge=1)
    class_id: int = Field(..., ge=1)
    cohort_id: int = Field(..., ge=1)
    facilitator_id: int = Field(..., ge=1)
    mode_id: int = Field(..., ge=1)
    trimester: Trimester
    intake_period: IntakePeriod
    start_date: datetime.date
    end_date: datetime.date
    max_enrollment: int = Field(default=30, ge=1, le=100)
    is_active: bool = True

    @field_validator("trimester", mode="before")
    @classmethod
    def coerce_trimester(cls, v):
        return _int_to_str(v)


class OfferingUpdate(BaseModel):
    module_id: Optional[int] = Field(default=None, ge=1)
    class_id: Optional[int] = Field(default=None, ge=1)
    cohort_id: Optional[int] = Field(default=None, ge=1)
    facilitator_id: Optional[int] = Field(default=None, ge=1)
    mode_id: Optional[int] = Field(default=None, ge=1)
    trimester: Optional[Trimester] = None
    intake_period: Optional[IntakePeriod] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    max_enrollment: Optional[int] = Field(default=None, ge=1, le=100)
    is_active: Optional[bool] = None

    @field_validator("trimester", mode="before")
    @classmethod
    def coerce_trimester(cls, v):
        return _int_to_str(v)


class CourseOffering(BaseModel):
    """The full representation of an offering as stored and returned by the API."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    module_id: int
    class_id: int
    cohort_id: int
    facilitator_id: int
    mode_id: int
    trimester: Trimester
    intake_period: IntakePeriod
    start_date: datetime.date
    end_date: datetime.date
    max_enrollment: int
    is_active: bool
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class OfferingFilter(PageParams):
    """
    Listing filters. `facilitator_id` is only honoured for managers; a
    facilitator's listing is always narrowed to their own offerings.
    `is_active=None` lists active and inactive offerings alike.
    """
    trimester: Optional[Trimester] = None
    cohort_id: Optional[int] = Field(default=None, ge=1)
    intake_period: Optional[IntakePeriod] = None
    facilitator_id: Optional[int] = Field(default=None, ge=1)
    mode_id: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = True

    @field_validator("trimester", mode="before")
    @classmethod
    def coerce_trimester(cls, v):
        return _int_to_str(v)
