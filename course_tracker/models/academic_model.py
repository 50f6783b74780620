# /course-tracker/course_tracker/models/academic_model.py

"""
Pydantic contracts for the reference data offerings are built from:
cohorts, classes, modules and delivery modes.

Field bounds mirror the CHECK constraints on the tables, so most bad input
is rejected here with a per-field message before the store is touched.
Date ordering is a cross-field rule and is checked by the consistency
enforcer instead.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Semester(str, Enum):
    S = "S"; J = "J"; ONE = "1"; TWO = "2"


class ModeName(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"
    HYBRID = "hybrid"


def _int_to_str(value):
    # JSON clients often send `1` where the enum value is the string "1".
    return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


# --- Cohort ---
class CohortCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    description: Optional[str] = None
    start_date: datetime.date
    end_date: datetime.date
    max_students: int = Field(..., ge=1, le=100)
    is_active: bool = True


class CohortUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    max_students: Optional[int] = Field(default=None, ge=1, le=100)
    is_active: Optional[bool] = None


class Cohort(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    description: Optional[str] = None
    start_date: datetime.date
    end_date: datetime.date
    max_students: int
    is_active: bool


# --- Class ---
class ClassCreate(BaseModel):
    name: str = Field(..., min_length=4, max_length=10, description="e.g. '2024S'")
    year: int = Field(..., ge=2020, le=2030)
    semester: Semester
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("semester", mode="before")
    @classmethod
    def coerce_semester(cls, v):
        return _int_to_str(v)


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=4, max_length=10)
    year: Optional[int] = Field(default=None, ge=2020, le=2030)
    semester: Optional[Semester] = None
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("semester", mode="before")
    @classmethod
    def coerce_semester(cls, v):
        return _int_to_str(v)


class Class(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    year: int
    semester: Semester
    description: Optional[str] = None


# --- Module ---
class ModuleCreate(BaseModel):
    code: str = Field(..., min_length=3, max_length=10)
    name: str = Field(..., min_length=5, max_length=100)
    description: Optional[str] = None
    credits: int = Field(..., ge=1, le=10)
    duration_weeks: int = Field(..., ge=1, le=52)
    is_active: bool = True


class ModuleUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=3, max_length=10)
    name: Optional[str] = Field(default=None, min_length=5, max_length=100)
    description: Optional[str] = None
    credits: Optional[int] = Field(default=None, ge=1, le=10)
    duration_weeks: Optional[int] = Field(default=None, ge=1, le=52)
    is_active: Optional[bool] = None


class Module(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    code: str
    name: str
    description: Optional[str] = None
    credits: int
    duration_weeks: int
    is_active: bool


# --- Mode ---
class ModeCreate(BaseModel):
    name: ModeName
    description: Optional[str] = Field(default=None, max_length=255)


class ModeUpdate(BaseModel):
    name: Optional[ModeName] = None
    description: Optional[str] = Field(default=None, max_length=255)


class Mode(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: ModeName
    description: Optional[str] = None
