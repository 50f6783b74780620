# /tests/test_composer_service.py

import pytest

from course_tracker import config
from course_tracker.core.errors import AccessDenied, DanglingReference, ValidationError
from course_tracker.db.models.offering_models import ActivityTracker, CourseOffering
from course_tracker.db.models.user_models import Facilitator, Manager, Student, User
from course_tracker.models.full_record_model import FullRecordCreate
from course_tracker.services.composer_service import create_full_record


@pytest.fixture
def full_request(scenario):
    """A new facilitator, who will deliver CS101 in trimester 2, with week 1 reported."""
    def _request(**overrides):
        body = {
            "userData": {
                "email": "new.facilitator@example.com",
                "password": "secret123",
                "first_name": "Barbara",
                "last_name": "Liskov",
                "role": "facilitator",
            },
            "roleData": {"employee_id": "EMP777", "specialization": "Software Engineering"},
            "courseOfferingData": {
                "module_id": scenario.module_id,
                "class_id": scenario.class_id,
                "cohort_id": scenario.cohort_id,
                "mode_id": scenario.mode_id,
                "trimester": 2,
                "intake_period": "FT",
                "start_date": "2024-05-01",
                "end_date": "2024-08-01",
            },
            "activityTrackerData": {"week_number": 1, "attendance": [True, True, False]},
        }
        body.update(overrides)
        # An override of None drops that key from the body.
        body = {k: v for k, v in body.items() if v is not None}
        return FullRecordCreate.model_validate(body)
    return _request


@pytest.fixture
def row_counts(count_rows):
    def _counts():
        return {model.__tablename__: count_rows(model) for model in (User, Manager, Facilitator, Student, CourseOffering, ActivityTracker)}
    return _counts


def test_full_record_links_every_step(db, manager, full_request, queue):
    record = create_full_record(full_request(), db, manager.caller)

    assert record.profile.role == "facilitator"
    assert record.profile.user_id == record.user.id
    # The new facilitator delivers the new offering.
    assert record.offering.facilitator_id == record.profile.id
    assert record.activity.allocation_id == record.offering.id
    assert record.activity.attendance == [True, True, False]
    # Composite writes do not notify.
    queue.push.assert_not_called()


def test_manager_record_uses_the_payload_facilitator(db, manager, scenario, full_request):
    request = full_request(
        userData={"email": "dean@example.com", "password": "secret123", "first_name": "Dean", "last_name": "Office", "role": "manager"},
        roleData={"department": "Faculty of Computing"},
    )
    request.offering_data["facilitator_id"] = scenario.facilitator.record_id

    record = create_full_record(request, db, manager.caller)
    assert record.profile.department == "Faculty of Computing"
    assert record.offering.facilitator_id == scenario.facilitator.record_id


def test_invalid_activity_rolls_everything_back(db, manager, full_request, row_counts):
    before = row_counts()
    with pytest.raises(ValidationError) as exc_info:
        create_full_record(full_request(activityTrackerData={"week_number": 60}), db, manager.caller)

    assert exc_info.value.fields == ["week_number"]
    assert row_counts() == before


def test_dangling_offering_reference_rolls_everything_back(db, manager, full_request, row_counts):
    before = row_counts()
    request = full_request()
    request.offering_data["mode_id"] = 999
    with pytest.raises(DanglingReference) as exc_info:
        create_full_record(request, db, manager.caller)

    assert exc_info.value.field == "mode_id"
    assert row_counts() == before


def test_only_managers_compose(db, facilitator, full_request):
    with pytest.raises(AccessDenied):
        create_full_record(full_request(), db, facilitator.caller)


def test_bootstrap_composition(db, full_request, monkeypatch):
    with pytest.raises(AccessDenied):
        create_full_record(full_request(), db, None)

    monkeypatch.setattr(config, "ALLOW_BOOTSTRAP_COMPOSITE", True)
    record = create_full_record(full_request(), db, None)
    assert record.user.email == "new.facilitator@example.com"


def test_role_payload_under_facilitator_data_key(db, manager, full_request):
    request = full_request(roleData=None, facilitatorData={"employee_id": "EMP778", "specialization": "Databases"})

    record = create_full_record(request, db, manager.caller)
    assert record.profile.employee_id == "EMP778"
    assert record.profile.specialization == "Databases"
