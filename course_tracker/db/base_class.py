# /course-tracker/course_tracker/db/base_class.py

from typing import Any

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base, declared_attr
from sqlalchemy.sql import func


class CustomBase:
    """
    Shared base for every ORM model.

    Tables default to the pluralised, lower-cased class name (`Cohort` ->
    `cohorts`). Models whose name does not pluralise that way set
    `__tablename__` explicitly.
    """
    id: Any

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


Base = declarative_base(cls=CustomBase)


class TimestampMixin:
    """`created_at`/`updated_at` columns maintained by the database."""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


def enum_check(column: str, values) -> str:
    """SQL text for a CHECK constraint limiting `column` to `values`."""
    return f"{column} IN ({', '.join(repr(v) for v in values)})"
