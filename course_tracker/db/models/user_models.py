# /course-tracker/course_tracker/db/models/user_models.py

"""
This module defines the SQLAlchemy ORM models for the `User` identity and its
three role-specific extensions: `Manager`, `Facilitator` and `Student`.

A User owns exactly one role record, linked through a unique `user_id`. The
role tables declare `ON DELETE CASCADE` so the database removes the role
record together with its User. No ORM relationships are declared: every
cross-table read is an explicit query in the repository layer.
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, ForeignKey, Integer, JSON, String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from ..base_class import Base, TimestampMixin, enum_check

ROLES = ("manager", "facilitator", "student")
STUDENT_STATUSES = ("active", "inactive", "graduated", "dropped")

DEFAULT_MANAGER_PERMISSIONS = {
    "course_allocation": True,
    "view_all_activities": True,
    "manage_users": True,
}


class User(TimestampMixin, Base):
    """SQLAlchemy model for the root identity of every person in the system."""
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("length(first_name) BETWEEN 2 AND 50", name="ck_users_first_name"),
        CheckConstraint("length(last_name) BETWEEN 2 AND 50", name="ck_users_last_name"),
        CheckConstraint(enum_check("role", ROLES), name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    # Always a bcrypt hash. Never copied into a read model.
    password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)


class Manager(TimestampMixin, Base):
    __table_args__ = (UniqueConstraint("user_id", name="uq_managers_user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    department = Column(String(100), nullable=True)
    permissions = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_MANAGER_PERMISSIONS))


class Facilitator(TimestampMixin, Base):
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_facilitators_user_id"),
        UniqueConstraint("employee_id", name="uq_facilitators_employee_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Optional, but unique when present (NULLs never collide).
    employee_id = Column(String(50), nullable=True)
    specialization = Column(String(100), nullable=True)
    qualifications = Column(JSON, nullable=False, default=list)


class Student(TimestampMixin, Base):
    """
    SQLAlchemy model for a student. Besides its User link, a student belongs
    to one Cohort and carries the institution's external `student_id`.
    """
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_students_user_id"),
        UniqueConstraint("student_id", name="uq_students_student_id"),
        CheckConstraint(enum_check("status", STUDENT_STATUSES), name="ck_students_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(50), nullable=False, index=True)
    cohort_id = Column(Integer, ForeignKey("cohorts.id"), nullable=False, index=True)
    enrollment_date = Column(Date, nullable=False, server_default=func.current_date())
    status = Column(String(20), nullable=False, default="active")
