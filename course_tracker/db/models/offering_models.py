# /course-tracker/course_tracker/db/models/offering_models.py

"""
This module defines the SQLAlchemy ORM models for `CourseOffering` and its
weekly `ActivityTracker` records.

Two uniqueness rules live here and are the store's serialization points:
- an active offering is unique per (module, class, cohort, trimester, intake),
  enforced by a partial unique index over active rows only, so a deactivated
  offering can be re-offered;
- an activity record is unique per (allocation_id, week_number).
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer,
    JSON, String, Text, UniqueConstraint, text,
)

from ..base_class import Base, TimestampMixin, enum_check

TRIMESTERS = ("1", "2", "3")
INTAKE_PERIODS = ("HT1", "HT2", "FT")
ACTIVITY_STATUSES = ("Done", "Pending", "Not Started")
ACTIVITY_STATUS_FIELDS = (
    "formative_one_grading",
    "formative_two_grading",
    "summative_grading",
    "course_moderation",
    "intranet_sync",
    "grade_book_status",
)
OFFERING_KEY_FIELDS = ("module_id", "class_id", "cohort_id", "trimester", "intake_period")


class CourseOffering(TimestampMixin, Base):
    """
    SQLAlchemy model for a scheduled delivery of a Module to a Class/Cohort by
    a Facilitator in a given term and mode. Every reference is required.
    """
    __tablename__ = "course_offerings"
    __table_args__ = (
        CheckConstraint(enum_check("trimester", TRIMESTERS), name="ck_course_offerings_trimester"),
        CheckConstraint(enum_check("intake_period", INTAKE_PERIODS), name="ck_course_offerings_intake_period"),
        CheckConstraint("end_date > start_date", name="ck_course_offerings_end_date"),
        CheckConstraint("max_enrollment BETWEEN 1 AND 100", name="ck_course_offerings_max_enrollment"),
        Index(
            "uq_course_offerings_active_tuple",
            *OFFERING_KEY_FIELDS,
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    cohort_id = Column(Integer, ForeignKey("cohorts.id"), nullable=False, index=True)
    facilitator_id = Column(Integer, ForeignKey("facilitators.id"), nullable=False, index=True)
    mode_id = Column(Integer, ForeignKey("modes.id"), nullable=False, index=True)
    trimester = Column(String(1), nullable=False)
    intake_period = Column(String(3), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    max_enrollment = Column(Integer, nullable=False, default=30)
    is_active = Column(Boolean, nullable=False, default=True)


class ActivityTracker(TimestampMixin, Base):
    """
    SQLAlchemy model for one facilitator's weekly activity report against an
    offering ("allocation"). Attendance is an ordered list of booleans, one
    per session held that week.
    """
    __tablename__ = "activity_trackers"
    __table_args__ = (
        UniqueConstraint("allocation_id", "week_number", name="uq_activity_trackers_allocation_week"),
        CheckConstraint("week_number BETWEEN 1 AND 52", name="ck_activity_trackers_week_number"),
        *(
            CheckConstraint(enum_check(field, ACTIVITY_STATUSES), name=f"ck_activity_trackers_{field}")
            for field in ACTIVITY_STATUS_FIELDS
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    allocation_id = Column(Integer, ForeignKey("course_offerings.id"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    attendance = Column(JSON, nullable=False, default=list)

    formative_one_grading = Column(String(20), nullable=False, default="Not Started")
    formative_two_grading = Column(String(20), nullable=False, default="Not Started")
    summative_grading = Column(String(20), nullable=False, default="Not Started")
    course_moderation = Column(String(20), nullable=False, default="Not Started")
    intranet_sync = Column(String(20), nullable=False, default="Not Started")
    grade_book_status = Column(String(20), nullable=False, default="Not Started")

    notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(Date, nullable=True)
