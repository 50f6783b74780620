# /tests/test_user_service.py

import pytest

from course_tracker.core.errors import (
    AccessDenied, ConstraintViolation, DanglingReference, NotFoundError, ReferentialIntegrityError, ValidationError,
)
from course_tracker.db.models.user_models import Facilitator, User
from course_tracker.models import user_model
from course_tracker.services import user_service


def _registration(role="facilitator", email="new.facilitator@example.com", **profile):
    return user_model.UserRegistration.model_validate({
        "user": {"email": email, "password": "secret123", "first_name": "Newton", "last_name": "Isaac", "role": role},
        "profile": {"role": role, **profile},
    })


def test_register_user_creates_user_and_tagged_profile(db, manager, count_rows):
    registered = user_service.register_user(_registration(employee_id="EMP100", qualifications=["MSc"]), db, manager.caller)

    assert registered.user.role == user_model.Role.FACILITATOR
    assert isinstance(registered.profile, user_model.FacilitatorProfile)
    assert registered.profile.employee_id == "EMP100"
    assert registered.profile.qualifications == ["MSc"]
    assert "password" not in registered.user.model_dump()
    assert count_rows(Facilitator) == 1


def test_register_manager_gets_default_permissions(db, manager):
    registered = user_service.register_user(_registration(role="manager", email="boss@example.com"), db, manager.caller)
    assert registered.profile.permissions == {
        "course_allocation": True, "view_all_activities": True, "manage_users": True,
    }


def test_register_rejects_profile_for_another_role(db, manager):
    registration = user_model.UserRegistration.model_validate({
        "user": {"email": "x@example.com", "password": "secret123", "first_name": "Xavier", "last_name": "Xu", "role": "manager"},
        "profile": {"role": "facilitator"},
    })
    with pytest.raises(ValidationError) as exc_info:
        user_service.register_user(registration, db, manager.caller)
    assert exc_info.value.fields == ["profile.role"]


def test_failed_profile_step_leaves_no_user(db, manager, scenario, count_rows):
    """A student pointing at a missing cohort must not leave a half-registered user behind."""
    users_before = count_rows(User)
    registration = _registration(role="student", email="lost@example.com", student_id="S-9", cohort_id=999)
    with pytest.raises(DanglingReference):
        user_service.register_user(registration, db, manager.caller)
    assert count_rows(User) == users_before


def test_only_managers_register_users(db, facilitator):
    with pytest.raises(AccessDenied):
        user_service.register_user(_registration(), db, facilitator.caller)


def test_get_user_self_and_others(db, manager, facilitator):
    own = user_service.get_user(facilitator.user_id, facilitator.caller, db)
    assert own.user.email == "facilitator@example.com"
    assert own.profile.id == facilitator.record_id

    with pytest.raises(AccessDenied):
        user_service.get_user(manager.user_id, facilitator.caller, db)

    assert user_service.get_user(facilitator.user_id, manager.caller, db).profile.role == "facilitator"
    with pytest.raises(NotFoundError):
        user_service.get_user(999, manager.caller, db)


def test_list_users_filters_by_role(db, manager, facilitator, other_facilitator):
    page = user_service.list_users(user_model.UserFilter(role="facilitator"), manager.caller, db)
    assert page.total == 2
    assert {u.email for u in page.items} == {"facilitator@example.com", "other.facilitator@example.com"}


def test_update_user_rejects_taken_email(db, manager, facilitator):
    with pytest.raises(ConstraintViolation) as exc_info:
        user_service.update_user(facilitator.user_id, user_model.UserUpdate(email="manager@example.com"), manager.caller, db)
    assert exc_info.value.field == "email"

    updated = user_service.update_user(facilitator.user_id, user_model.UserUpdate(first_name="Alonzo"), manager.caller, db)
    assert updated.first_name == "Alonzo"


def test_delete_user_removes_exactly_one_role_record(db, manager, facilitator):
    removed = user_service.delete_user(facilitator.user_id, manager.caller, db)
    assert removed == 1
    assert db.get_user_by_id(facilitator.user_id) is None
    assert db.count_role_records(facilitator.user_id) == 0


def test_facilitator_with_offerings_cannot_be_deleted(db, manager, scenario):
    with pytest.raises(ReferentialIntegrityError):
        user_service.delete_user(scenario.facilitator.user_id, manager.caller, db)
    assert db.get_user_by_id(scenario.facilitator.user_id) is not None


def test_list_facilitators_for_any_role(db, facilitator, other_facilitator, make_user):
    make_user("facilitator", "retired@example.com", "Old", "Timer", is_active=False)
    summaries = user_service.list_facilitators(facilitator.caller, db)
    assert [s.last_name for s in summaries] == ["Lovelace", "Turing"]
