# /course-tracker/course_tracker/services/database_helpers/base_repository_sql.py

"""
Shared plumbing for the SQL repositories.

Repositories never commit. They `flush()` so that generated ids are available
to the next step and constraint violations surface immediately, and leave the
commit/rollback decision to `DatabaseService.transaction()`. That is what lets
the composite creation flow run several repository writes as one atomic unit.

Any `IntegrityError` raised by the driver is translated here into the domain
taxonomy, with the offending field recovered from the constraint name.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.errors import ConstraintViolation, CourseTrackerError, DanglingReference

logger = logging.getLogger(__name__)

KNOWN_TABLES = (
    "activity_trackers", "course_offerings", "notifications", "facilitators",
    "managers", "students", "cohorts", "classes", "modules", "modes", "users",
)

# Multi-column constraints are reported against the columns they cover.
COMPOSITE_CONSTRAINTS = {
    "uq_course_offerings_active_tuple": "module_id,class_id,cohort_id,trimester,intake_period",
    "uq_activity_trackers_allocation_week": "allocation_id,week_number",
}

_SQLITE_COLUMNS = re.compile(r"(UNIQUE|NOT NULL) constraint failed: ([\w\.,\s]+)")
_CONSTRAINT_NAME = re.compile(r"\b((?:uq|ck)_\w+|\w+_fkey)\b")


def _field_from_constraint(name: str) -> Optional[str]:
    if name in COMPOSITE_CONSTRAINTS:
        return COMPOSITE_CONSTRAINTS[name]
    rest = re.sub(r"^(uq|ck)_", "", name)
    rest = re.sub(r"_fkey$", "", rest)
    for table in KNOWN_TABLES:
        if rest.startswith(table + "_"):
            return rest[len(table) + 1:]
    return None


def translate_integrity_error(exc: IntegrityError) -> CourseTrackerError:
    """Maps a driver integrity error to ConstraintViolation or DanglingReference."""
    text = str(exc.orig)

    if "foreign key" in text.lower():
        match = _CONSTRAINT_NAME.search(text)
        field = _field_from_constraint(match.group(1)) if match else None
        return DanglingReference(field=field, message="A referenced record does not exist.")

    match = _SQLITE_COLUMNS.search(text)
    if match:
        kind, columns = match.groups()
        names = [c.strip().split(".")[-1] for c in columns.split(",")]
        field = ",".join(names)
        if kind == "NOT NULL":
            return ConstraintViolation(field, f"'{field}' is required.")
        return ConstraintViolation(field, f"A record with this {field.replace(',', ', ')} already exists.")

    match = _CONSTRAINT_NAME.search(text)
    if match:
        name = match.group(1)
        field = _field_from_constraint(name)
        if name.startswith("uq_") or "duplicate key" in text:
            return ConstraintViolation(field, f"A record with this {field} already exists.")
        return ConstraintViolation(field, f"Value for '{field}' is out of the allowed range.")

    return ConstraintViolation(None, "The write violates a database constraint.")


class SQLRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def _flush(self) -> None:
        """Flushes pending writes, translating integrity errors for the caller."""
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.info("Integrity error on flush: %s", e.orig)
            raise translate_integrity_error(e) from e

    def _add(self, model: Type, record: Dict[str, Any]):
        obj = model(**record)
        self.db.add(obj)
        self._flush()
        return obj

    def _update(self, obj, data: Dict[str, Any]):
        for key, value in data.items():
            setattr(obj, key, value)
        self._flush()
        return obj

    def _delete(self, obj) -> None:
        self.db.delete(obj)
        self._flush()

    def _count(self, model: Type, *criteria) -> int:
        return self.db.scalar(select(func.count()).select_from(model).where(*criteria)) or 0

    def _page(self, stmt, offset: int, limit: int) -> Tuple[list, int]:
        """Runs `stmt` for one page and returns (rows, total matching rows)."""
        total = self.db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
        rows = self.db.scalars(stmt.offset(offset).limit(limit)).all()
        return list(rows), total
