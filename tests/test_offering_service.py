# /tests/test_offering_service.py

import pytest

from course_tracker.core.errors import (
    AccessDenied, ConstraintViolation, NotFoundError, ReferentialIntegrityError, ValidationError,
)
from course_tracker.models import offering_model
from course_tracker.services import offering_service


def test_create_offering(db, manager, offering_payload):
    offering = offering_service.create_offering(offering_model.OfferingCreate(**offering_payload()), manager.caller, db)
    assert offering.trimester == offering_model.Trimester.TWO
    assert offering.max_enrollment == 30
    assert offering.is_active


def test_duplicate_active_offering_is_rejected(db, manager, offering_payload):
    with pytest.raises(ConstraintViolation):
        offering_service.create_offering(offering_model.OfferingCreate(**offering_payload(trimester=1)), manager.caller, db)


def test_facilitator_cannot_create_offerings(db, scenario, offering_payload):
    with pytest.raises(AccessDenied):
        offering_service.create_offering(
            offering_model.OfferingCreate(**offering_payload()), scenario.facilitator.caller, db,
        )


def test_facilitator_reads_own_offering_only(db, scenario, other_facilitator):
    own = offering_service.get_offering(scenario.offering_id, scenario.facilitator.caller, db)
    assert own.id == scenario.offering_id

    with pytest.raises(AccessDenied):
        offering_service.get_offering(scenario.offering_id, other_facilitator.caller, db)


def test_missing_offering_is_not_found(db, manager):
    with pytest.raises(NotFoundError):
        offering_service.get_offering(999, manager.caller, db)


def test_facilitator_listing_is_narrowed(db, manager, scenario, other_facilitator, offering_payload):
    offering_service.create_offering(
        offering_model.OfferingCreate(**offering_payload(facilitator_id=other_facilitator.record_id)), manager.caller, db,
    )

    everything = offering_service.list_offerings(offering_model.OfferingFilter(), manager.caller, db)
    assert everything.total == 2

    # The facilitator_id filter is ignored for facilitators.
    own = offering_service.list_offerings(
        offering_model.OfferingFilter(facilitator_id=other_facilitator.record_id), scenario.facilitator.caller, db,
    )
    assert [o.id for o in own.items] == [scenario.offering_id]

    by_facilitator = offering_service.list_offerings(
        offering_model.OfferingFilter(facilitator_id=other_facilitator.record_id), manager.caller, db,
    )
    assert by_facilitator.total == 1
    assert by_facilitator.items[0].facilitator_id == other_facilitator.record_id


def test_list_filters_and_ordering(db, manager, scenario, offering_payload):
    offering_service.create_offering(offering_model.OfferingCreate(**offering_payload(trimester=3, start_date="2024-09-01", end_date="2024-12-01")), manager.caller, db)

    page = offering_service.list_offerings(offering_model.OfferingFilter(), manager.caller, db)
    assert [o.trimester.value for o in page.items] == ["3", "1"]

    trimester_one = offering_service.list_offerings(offering_model.OfferingFilter(trimester=1), manager.caller, db)
    assert [o.id for o in trimester_one.items] == [scenario.offering_id]

    paged = offering_service.list_offerings(offering_model.OfferingFilter(limit=1, page=2), manager.caller, db)
    assert paged.total == 2
    assert paged.pages == 2
    assert [o.id for o in paged.items] == [scenario.offering_id]


def test_inactive_offerings_are_hidden_by_default(db, manager, scenario):
    offering_service.update_offering(scenario.offering_id, offering_model.OfferingUpdate(is_active=False), manager.caller, db)
    assert offering_service.list_offerings(offering_model.OfferingFilter(), manager.caller, db).total == 0
    assert offering_service.list_offerings(offering_model.OfferingFilter(is_active=None), manager.caller, db).total == 1


def test_student_sees_own_cohort_offerings(db, student, scenario):
    page = offering_service.list_offerings(offering_model.OfferingFilter(), student.caller, db)
    assert [o.cohort_id for o in page.items] == [scenario.cohort_id]


def test_update_checks_merged_dates(db, manager, scenario):
    with pytest.raises(ValidationError) as exc_info:
        offering_service.update_offering(
            scenario.offering_id, offering_model.OfferingUpdate(end_date="2024-01-01"), manager.caller, db,
        )
    assert exc_info.value.fields == ["end_date"]


def test_offering_with_activities_cannot_be_deleted(db, manager, scenario):
    with db.transaction():
        db.add_activity({"allocation_id": scenario.offering_id, "week_number": 1})
    with pytest.raises(ReferentialIntegrityError):
        offering_service.delete_offering(scenario.offering_id, manager.caller, db)


def test_delete_offering(db, manager, scenario):
    offering_service.delete_offering(scenario.offering_id, manager.caller, db)
    assert db.get_offering_by_id(scenario.offering_id) is None
