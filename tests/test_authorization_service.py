# /tests/test_authorization_service.py

import pytest

from course_tracker import config
from course_tracker.core.errors import AccessDenied
from course_tracker.models.user_model import Caller
from course_tracker.services.authorization_service import (
    Operation, ResourceType, ensure_record_visible, ensure_user_visible,
    resolve_composite_scope, resolve_scope,
)


def test_manager_scope_is_unrestricted(db, manager):
    scope = resolve_scope(manager.caller, ResourceType.OFFERING, Operation.DELETE, db)
    assert scope.allowed
    assert scope.is_manager
    assert scope.facilitator_id is None
    assert scope.cohort_id is None


def test_facilitator_offering_reads_are_narrowed_to_own_record(db, facilitator):
    scope = resolve_scope(facilitator.caller, ResourceType.OFFERING, Operation.LIST, db)
    assert scope.facilitator_id == facilitator.record_id


@pytest.mark.parametrize("operation", [Operation.CREATE, Operation.UPDATE, Operation.DELETE])
def test_facilitator_cannot_write_offerings(db, facilitator, operation):
    with pytest.raises(AccessDenied):
        resolve_scope(facilitator.caller, ResourceType.OFFERING, operation, db)


def test_facilitator_may_write_activities_of_own_offerings(db, facilitator):
    scope = resolve_scope(facilitator.caller, ResourceType.ACTIVITY, Operation.CREATE, db)
    assert scope.facilitator_id == facilitator.record_id


def test_reference_data_is_readable_but_not_writable_by_facilitators(db, facilitator):
    assert resolve_scope(facilitator.caller, ResourceType.MODULE, Operation.READ, db).allowed
    with pytest.raises(AccessDenied):
        resolve_scope(facilitator.caller, ResourceType.MODULE, Operation.CREATE, db)


def test_student_reads_own_cohort_offerings(db, student, scenario):
    scope = resolve_scope(student.caller, ResourceType.OFFERING, Operation.LIST, db)
    assert scope.cohort_id == scenario.cohort_id
    assert scope.facilitator_id is None


def test_student_offering_reads_can_be_switched_off(db, student, monkeypatch):
    monkeypatch.setattr(config, "STUDENT_READ_SCOPE", "none")
    with pytest.raises(AccessDenied):
        resolve_scope(student.caller, ResourceType.OFFERING, Operation.LIST, db)


def test_student_cannot_read_activities(db, student):
    with pytest.raises(AccessDenied):
        resolve_scope(student.caller, ResourceType.ACTIVITY, Operation.READ, db)


def test_caller_without_role_record_is_denied(db):
    with pytest.raises(AccessDenied):
        resolve_scope(Caller(id=999, role="manager"), ResourceType.MODULE, Operation.READ, db)


def test_caller_claiming_another_role_is_denied(db, facilitator):
    with pytest.raises(AccessDenied):
        resolve_scope(Caller(id=facilitator.user_id, role="manager"), ResourceType.OFFERING, Operation.LIST, db)


def test_inactive_user_is_denied(db, make_user):
    inactive = make_user("manager", "gone@example.com", is_active=False)
    with pytest.raises(AccessDenied):
        resolve_scope(inactive.caller, ResourceType.MODULE, Operation.READ, db)


def test_missing_caller_is_denied(db):
    with pytest.raises(AccessDenied):
        resolve_scope(None, ResourceType.MODULE, Operation.READ, db)


def test_record_outside_facilitator_scope_is_denied(db, scenario, facilitator, other_facilitator):
    offering = db.get_offering_by_id(scenario.offering_id)

    own_scope = resolve_scope(facilitator.caller, ResourceType.OFFERING, Operation.READ, db)
    ensure_record_visible(own_scope, offering)

    other_scope = resolve_scope(other_facilitator.caller, ResourceType.OFFERING, Operation.READ, db)
    with pytest.raises(AccessDenied):
        ensure_record_visible(other_scope, offering)


def test_users_may_only_read_themselves(db, facilitator, manager):
    scope = resolve_scope(facilitator.caller, ResourceType.USER, Operation.READ, db)
    ensure_user_visible(scope, facilitator.user_id)
    with pytest.raises(AccessDenied):
        ensure_user_visible(scope, manager.user_id)
    with pytest.raises(AccessDenied):
        resolve_scope(facilitator.caller, ResourceType.USER, Operation.LIST, db)


def test_composite_scope(db, manager, facilitator, monkeypatch):
    assert resolve_composite_scope(manager.caller, db).is_manager
    with pytest.raises(AccessDenied):
        resolve_composite_scope(facilitator.caller, db)
    with pytest.raises(AccessDenied):
        resolve_composite_scope(None, db)

    monkeypatch.setattr(config, "ALLOW_BOOTSTRAP_COMPOSITE", True)
    assert resolve_composite_scope(None, db).is_bootstrap
