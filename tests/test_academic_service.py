# /tests/test_academic_service.py

import pytest

from course_tracker.core.errors import AccessDenied, ConstraintViolation, NotFoundError, ReferentialIntegrityError
from course_tracker.models import academic_model
from course_tracker.services import academic_service


def test_manager_creates_reference_data(db, manager):
    cohort = academic_service.create_entity(
        "cohort",
        academic_model.CohortCreate(name="DS2025", start_date="2025-01-10", end_date="2025-12-10", max_students=40),
        manager.caller, db,
    )
    assert isinstance(cohort, academic_model.Cohort)
    assert cohort.is_active

    mode = academic_service.create_entity("mode", {"name": "hybrid", "description": "Mixed delivery"}, manager.caller, db)
    assert mode.name == academic_model.ModeName.HYBRID


def test_duplicate_name_is_a_constraint_violation(db, manager, scenario):
    with pytest.raises(ConstraintViolation) as exc_info:
        academic_service.create_entity("class", {"name": "2024S", "year": 2024, "semester": "S"}, manager.caller, db)
    assert exc_info.value.field == "name"


def test_facilitator_reads_but_cannot_write(db, facilitator, scenario):
    modules = academic_service.list_entities("module", facilitator.caller, db)
    assert [m.code for m in modules] == ["CS101"]

    with pytest.raises(AccessDenied):
        academic_service.update_entity("module", scenario.module_id, {"credits": 5}, facilitator.caller, db)


def test_update_entity(db, manager, scenario):
    module = academic_service.update_entity("module", scenario.module_id, {"credits": 5}, manager.caller, db)
    assert module.credits == 5
    assert module.code == "CS101"


def test_get_missing_entity(db, manager):
    with pytest.raises(NotFoundError):
        academic_service.get_entity("mode", 999, manager.caller, db)


def test_referenced_entity_cannot_be_deleted(db, manager, scenario, student):
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        academic_service.delete_entity("cohort", scenario.cohort_id, manager.caller, db)
    assert "course_offerings" in exc_info.value.message
    assert "students" in exc_info.value.message


def test_unreferenced_entity_is_deleted(db, manager, scenario):
    mode = academic_service.create_entity("mode", {"name": "in-person"}, manager.caller, db)
    academic_service.delete_entity("mode", mode.id, manager.caller, db)
    assert db.get_academic("mode", mode.id) is None


def test_list_active_only(db, manager, scenario):
    academic_service.create_entity(
        "module", {"code": "CS999", "name": "Retired Module", "credits": 2, "duration_weeks": 4, "is_active": False},
        manager.caller, db,
    )
    assert len(academic_service.list_entities("module", manager.caller, db)) == 2
    assert [m.code for m in academic_service.list_entities("module", manager.caller, db, active_only=True)] == ["CS101"]
