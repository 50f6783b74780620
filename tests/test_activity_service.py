# /tests/test_activity_service.py

import datetime

import pytest

from course_tracker.core.errors import AccessDenied, ConstraintViolation, DanglingReference, NotFoundError
from course_tracker.db.models.offering_models import ActivityTracker
from course_tracker.models import activity_model
from course_tracker.models.notification_model import NotificationIntent
from course_tracker.services import activity_service


def _submission(offering_id, week_number=1, **fields):
    return activity_model.ActivitySubmission(allocation_id=offering_id, week_number=week_number, **fields)


def test_first_submission_creates_record_with_defaults(db, scenario, trigger):
    result = activity_service.submit_activity(_submission(scenario.offering_id), scenario.facilitator.caller, db, trigger)

    assert result.created is True
    record = result.activity
    assert record.attendance == []
    for field in ("formative_one_grading", "formative_two_grading", "summative_grading",
                  "course_moderation", "intranet_sync", "grade_book_status"):
        assert getattr(record, field) == activity_model.ActivityStatus.NOT_STARTED
    assert record.submitted_at is not None
    assert record.due_date == datetime.date(2024, 1, 22)


def test_resubmitting_a_week_updates_the_same_record(db, scenario, trigger, count_rows):
    first = activity_service.submit_activity(
        _submission(scenario.offering_id, attendance=[True, False], notes="First pass"),
        scenario.facilitator.caller, db, trigger,
    )
    second = activity_service.submit_activity(
        _submission(scenario.offering_id, formative_one_grading="Done"),
        scenario.facilitator.caller, db, trigger,
    )

    assert second.created is False
    assert second.activity.id == first.activity.id
    assert second.activity.formative_one_grading == activity_model.ActivityStatus.DONE
    # Fields the second call did not carry keep their values.
    assert second.activity.attendance == [True, False]
    assert second.activity.notes == "First pass"
    assert count_rows(ActivityTracker) == 1


def test_each_successful_write_emits_one_intent(db, scenario, trigger, queue):
    result = activity_service.submit_activity(_submission(scenario.offering_id, week_number=3), scenario.facilitator.caller, db, trigger)

    queue.push.assert_called_once()
    intent = queue.push.call_args.args[0]
    assert intent == NotificationIntent(
        facilitator_id=scenario.facilitator.record_id, activity_id=result.activity.id, week_number=3,
    )

    activity_service.update_activity(
        result.activity.id, activity_model.ActivityUpdate(intranet_sync="Pending"), scenario.facilitator.caller, db, trigger,
    )
    assert queue.push.call_count == 2


def test_queue_failure_does_not_fail_the_write(db, scenario, trigger, queue, count_rows):
    queue.push.side_effect = ConnectionError("redis is down")

    result = activity_service.submit_activity(_submission(scenario.offering_id), scenario.facilitator.caller, db, trigger)

    assert result.created is True
    assert count_rows(ActivityTracker) == 1
    queue.push.assert_called_once()


def test_failed_write_emits_nothing(db, scenario, trigger, queue):
    with pytest.raises(DanglingReference):
        activity_service.submit_activity(_submission(999), scenario.facilitator.caller, db, trigger)
    queue.push.assert_not_called()


def test_lost_insert_race_is_retried_as_merge(db, scenario, trigger, queue, mocker):
    """A concurrent insert of the same week surfaces as a unique violation on the first attempt."""
    real_write = activity_service.write_submission
    attempts = []

    def racing_write(submission, db_service):
        attempts.append(submission)
        if len(attempts) == 1:
            with db_service.transaction():
                db_service.add_activity({"allocation_id": scenario.offering_id, "week_number": 1, "notes": "other request"})
            raise ConstraintViolation(activity_service.WEEK_KEY, "duplicate week")
        return real_write(submission, db_service)

    mocker.patch.object(activity_service, "write_submission", side_effect=racing_write)

    result = activity_service.submit_activity(
        _submission(scenario.offering_id, summative_grading="Done"), scenario.facilitator.caller, db, trigger,
    )

    assert len(attempts) == 2
    assert result.created is False
    assert result.activity.notes == "other request"
    assert result.activity.summative_grading == activity_model.ActivityStatus.DONE
    queue.push.assert_called_once()


def test_other_facilitator_cannot_submit(db, scenario, other_facilitator, trigger):
    with pytest.raises(AccessDenied):
        activity_service.submit_activity(_submission(scenario.offering_id), other_facilitator.caller, db, trigger)


def test_students_have_no_access_to_activities(db, scenario, student, trigger):
    with pytest.raises(AccessDenied):
        activity_service.list_activities(activity_model.ActivityFilter(), student.caller, db)


def test_get_and_list_activities(db, manager, scenario, other_facilitator, trigger):
    for week in (1, 2):
        activity_service.submit_activity(_submission(scenario.offering_id, week_number=week), scenario.facilitator.caller, db, trigger)

    page = activity_service.list_activities(activity_model.ActivityFilter(), scenario.facilitator.caller, db)
    assert [a.week_number for a in page.items] == [2, 1]

    week_two = activity_service.list_activities(activity_model.ActivityFilter(week_number=2), manager.caller, db)
    assert week_two.total == 1

    assert activity_service.list_activities(activity_model.ActivityFilter(), other_facilitator.caller, db).total == 0
    with pytest.raises(AccessDenied):
        activity_service.get_activity(page.items[0].id, other_facilitator.caller, db)
    assert activity_service.get_activity(page.items[0].id, manager.caller, db).week_number == 2


def test_delete_activity(db, scenario, trigger, count_rows):
    result = activity_service.submit_activity(_submission(scenario.offering_id), scenario.facilitator.caller, db, trigger)
    activity_service.delete_activity(result.activity.id, scenario.facilitator.caller, db)
    assert count_rows(ActivityTracker) == 0
    with pytest.raises(NotFoundError):
        activity_service.get_activity(result.activity.id, scenario.facilitator.caller, db)
