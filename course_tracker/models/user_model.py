# /course-tracker/course_tracker/models/user_model.py

"""
Pydantic contracts for users, callers and the three role records.

The role record is a tagged variant: `RoleProfileCreate` and `RoleProfile`
are discriminated unions on `role`, so the role is resolved once, when the
payload is parsed, and later code switches on the tag instead of re-reading
a string field.
"""

import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .common_model import PageParams


# --- Core Enumerations ---
class Role(str, Enum):
    MANAGER = "manager"
    FACILITATOR = "facilitator"
    STUDENT = "student"


class StudentStatus(str, Enum):
    ACTIVE = "active"; INACTIVE = "inactive"; GRADUATED = "graduated"; DROPPED = "dropped"


# --- Caller Identity ---
class Caller(BaseModel):
    """A verified identity handed to the core by the identity provider."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    role: Role


# --- User Contracts ---
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    role: Role
    is_active: bool = True


class UserUpdate(BaseModel):
    """Partial update. The role cannot change: it is fixed by the role record."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    is_active: Optional[bool] = None


class User(BaseModel):
    """The public representation of a user. The password hash is never included."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


# --- Role Record Contracts (create) ---
class ManagerProfileCreate(BaseModel):
    role: Literal["manager"] = "manager"
    department: Optional[str] = Field(default=None, max_length=100)


class FacilitatorProfileCreate(BaseModel):
    role: Literal["facilitator"] = "facilitator"
    employee_id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    specialization: Optional[str] = Field(default=None, max_length=100)
    qualifications: List[str] = Field(default_factory=list)


class StudentProfileCreate(BaseModel):
    role: Literal["student"] = "student"
    student_id: str = Field(..., min_length=1, max_length=50, description="The institution's external student number.")
    cohort_id: int = Field(..., ge=1)
    enrollment_date: Optional[datetime.date] = None
    status: StudentStatus = StudentStatus.ACTIVE


RoleProfileCreate = Annotated[
    Union[ManagerProfileCreate, FacilitatorProfileCreate, StudentProfileCreate],
    Field(discriminator="role"),
]


# --- Role Record Contracts (read) ---
class ManagerProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    role: Literal["manager"] = "manager"
    id: int
    user_id: int
    department: Optional[str] = None
    permissions: Dict[str, bool] = Field(default_factory=dict)


class FacilitatorProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    role: Literal["facilitator"] = "facilitator"
    id: int
    user_id: int
    employee_id: Optional[str] = None
    specialization: Optional[str] = None
    qualifications: List[str] = Field(default_factory=list)


class StudentProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    role: Literal["student"] = "student"
    id: int
    user_id: int
    student_id: str
    cohort_id: int
    enrollment_date: Optional[datetime.date] = None
    status: StudentStatus


RoleProfile = Annotated[
    Union[ManagerProfile, FacilitatorProfile, StudentProfile],
    Field(discriminator="role"),
]

# Role rows carry no tag of their own; the tag is the table they live in.
PROFILE_MODELS = {"manager": ManagerProfile, "facilitator": FacilitatorProfile, "student": StudentProfile}


# --- Registration ---
class UserRegistration(BaseModel):
    """A new user together with the role record that matches `user.role`."""
    user: UserCreate
    profile: RoleProfileCreate


class RegisteredUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: User
    profile: Optional[RoleProfile] = None


class UserFilter(PageParams):
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class FacilitatorSummary(BaseModel):
    """An active facilitator with the name fields of its user, for pickers."""
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    employee_id: Optional[str] = None
    specialization: Optional[str] = None
    first_name: str
    last_name: str
    email: str
