# /course-tracker/course_tracker/services/database_helpers/academic_repository_sql.py

"""
This module contains the SQLAlchemy queries for the reference-data tables:
Cohort, Class, Module and Mode. All four share the same shape (a surrogate id
plus one natural unique key), so the queries are written once against the
model class and exposed per entity by `DatabaseService`.
"""

from typing import Dict, List, Type

from sqlalchemy import select

from ...db.models.academic_models import Class, Cohort, Mode, Module
from ...db.models.offering_models import CourseOffering
from ...db.models.user_models import Student
from .base_repository_sql import SQLRepository

ACADEMIC_MODELS = {"cohort": Cohort, "class": Class, "module": Module, "mode": Mode}

# The natural key each table is unique on.
NATURAL_KEYS = {"cohort": "name", "class": "name", "module": "code", "mode": "name"}

# The CourseOffering column that points at each reference table.
OFFERING_COLUMNS = {
    "cohort": CourseOffering.cohort_id,
    "class": CourseOffering.class_id,
    "module": CourseOffering.module_id,
    "mode": CourseOffering.mode_id,
}


class AcademicRepositorySQL(SQLRepository):

    def get(self, entity: str, entity_id: int):
        return self.db.get(ACADEMIC_MODELS[entity], entity_id)

    def get_by_natural_key(self, entity: str, value: str):
        model: Type = ACADEMIC_MODELS[entity]
        column = getattr(model, NATURAL_KEYS[entity])
        return self.db.scalars(select(model).where(column == value)).first()

    def list_all(self, entity: str, active_only: bool = False) -> List:
        model: Type = ACADEMIC_MODELS[entity]
        stmt = select(model)
        if active_only and hasattr(model, "is_active"):
            stmt = stmt.where(model.is_active.is_(True))
        return list(self.db.scalars(stmt.order_by(model.id)).all())

    def add(self, entity: str, record: Dict):
        return self._add(ACADEMIC_MODELS[entity], record)

    def update(self, obj, data: Dict):
        return self._update(obj, data)

    def delete(self, obj) -> None:
        self._delete(obj)

    def count_dependents(self, entity: str, entity_id: int) -> Dict[str, int]:
        """Counts the rows that still reference this record, by dependent table."""
        dependents = {"course_offerings": self._count(CourseOffering, OFFERING_COLUMNS[entity] == entity_id)}
        if entity == "cohort":
            dependents["students"] = self._count(Student, Student.cohort_id == entity_id)
        return dependents