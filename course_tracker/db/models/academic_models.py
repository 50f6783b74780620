# /course-tracker/course_tracker/db/models/academic_models.py

"""
This module defines the SQLAlchemy ORM models for the reference data an
offering is built from: `Cohort`, `Class`, `Module` and `Mode`.

Range, enum and length rules are declared as named CHECK constraints
(`ck_<table>_<field>`) and natural keys as named UNIQUE constraints
(`uq_<table>_<field>`), so a violation reported by the database can always be
traced back to the field that caused it.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, Integer, String, Text, UniqueConstraint

from ..base_class import Base, TimestampMixin, enum_check

SEMESTERS = ("S", "J", "1", "2")
MODE_NAMES = ("online", "in-person", "hybrid")


class Cohort(TimestampMixin, Base):
    """A group of students enrolled together over a fixed period."""
    __table_args__ = (
        UniqueConstraint("name", name="uq_cohorts_name"),
        CheckConstraint("length(name) BETWEEN 3 AND 50", name="ck_cohorts_name"),
        CheckConstraint("end_date > start_date", name="ck_cohorts_end_date"),
        CheckConstraint("max_students BETWEEN 1 AND 100", name="ck_cohorts_max_students"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    max_students = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class Class(TimestampMixin, Base):
    """A timetable class such as `2024S`, identified by year and semester."""
    __tablename__ = "classes"
    __table_args__ = (
        UniqueConstraint("name", name="uq_classes_name"),
        CheckConstraint("length(name) BETWEEN 4 AND 10", name="ck_classes_name"),
        CheckConstraint("year BETWEEN 2020 AND 2030", name="ck_classes_year"),
        CheckConstraint(enum_check("semester", SEMESTERS), name="ck_classes_semester"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(10), nullable=False)
    year = Column(Integer, nullable=False)
    semester = Column(String(1), nullable=False)
    description = Column(String(255), nullable=True)


class Module(TimestampMixin, Base):
    __table_args__ = (
        UniqueConstraint("code", name="uq_modules_code"),
        CheckConstraint("length(code) BETWEEN 3 AND 10", name="ck_modules_code"),
        CheckConstraint("length(name) BETWEEN 5 AND 100", name="ck_modules_name"),
        CheckConstraint("credits BETWEEN 1 AND 10", name="ck_modules_credits"),
        CheckConstraint("duration_weeks BETWEEN 1 AND 52", name="ck_modules_duration_weeks"),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    credits = Column(Integer, nullable=False)
    duration_weeks = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class Mode(TimestampMixin, Base):
    __table_args__ = (
        UniqueConstraint("name", name="uq_modes_name"),
        CheckConstraint(enum_check("name", MODE_NAMES), name="ck_modes_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), nullable=False)
    description = Column(String(255), nullable=True)
