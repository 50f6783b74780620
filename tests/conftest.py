# /tests/conftest.py

import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from course_tracker.core.security import hash_password
from course_tracker.db import base  # noqa: F401
from course_tracker.db.base_class import Base
from course_tracker.db.database import build_engine
from course_tracker.models.user_model import Caller
from course_tracker.services.database_service import DatabaseService
from course_tracker.services.notification_service import NotificationTrigger

# A low bcrypt cost keeps fixture users cheap to create.
FIXTURE_PASSWORD_HASH = hash_password("secret123", rounds=4)


@pytest.fixture
def engine():
    """
    A fresh in-memory SQLite database for EACH test. StaticPool keeps the one
    connection alive, so every session (and the TestClient's worker threads)
    sees the same database.
    """
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    db_session = session_factory()
    yield db_session
    db_session.close()


@pytest.fixture
def db(session):
    return DatabaseService(db_session=session)


@pytest.fixture
def queue():
    """A stand-in for the Redis notification queue."""
    return MagicMock()


@pytest.fixture
def trigger(queue):
    return NotificationTrigger(queue)


@pytest.fixture
def count_rows(session):
    """Counts the rows of an ORM model, e.g. `count_rows(User)`."""
    def _count(model) -> int:
        return session.scalar(select(func.count()).select_from(model))
    return _count


# --- Identity Fixtures ---

@pytest.fixture
def make_user(db):
    """
    Writes a user and its role record straight into the store, bypassing
    authorization, and returns the caller identity plus the role record id.
    """
    def _make(role: str, email: str, first_name: str = "Test", last_name: str = "User", is_active: bool = True, **profile):
        with db.transaction():
            user = db.add_user({
                "email": email,
                "password": FIXTURE_PASSWORD_HASH,
                "first_name": first_name,
                "last_name": last_name,
                "role": role,
                "is_active": is_active,
            })
            record = db.add_role_record(role, {"user_id": user.id, **profile})
        return SimpleNamespace(caller=Caller(id=user.id, role=role), user_id=user.id, record_id=record.id)
    return _make


@pytest.fixture
def manager(make_user):
    return make_user("manager", "manager@example.com", "Grace", "Hopper", department="Academics")


@pytest.fixture
def facilitator(make_user):
    return make_user("facilitator", "facilitator@example.com", "Alan", "Turing", employee_id="EMP001")


@pytest.fixture
def other_facilitator(make_user):
    return make_user("facilitator", "other.facilitator@example.com", "Ada", "Lovelace", employee_id="EMP002")


# --- Reference Data Fixtures ---

@pytest.fixture
def scenario(db, facilitator):
    """
    Module CS101, class 2024S, cohort SE2024 and the online mode, plus one
    active offering of CS101 (trimester 1, HT1) delivered by `facilitator`.
    """
    with db.transaction():
        module = db.add_academic("module", {"code": "CS101", "name": "Introduction to Programming", "credits": 4, "duration_weeks": 12})
        cls = db.add_academic("class", {"name": "2024S", "year": 2024, "semester": "S"})
        cohort = db.add_academic("cohort", {
            "name": "SE2024",
            "start_date": datetime.date(2024, 1, 15),
            "end_date": datetime.date(2024, 12, 15),
            "max_students": 2,
        })
        mode = db.add_academic("mode", {"name": "online"})
        offering = db.add_offering({
            "module_id": module.id,
            "class_id": cls.id,
            "cohort_id": cohort.id,
            "facilitator_id": facilitator.record_id,
            "mode_id": mode.id,
            "trimester": "1",
            "intake_period": "HT1",
            "start_date": datetime.date(2024, 1, 15),
            "end_date": datetime.date(2024, 4, 15),
        })
    return SimpleNamespace(
        module_id=module.id,
        class_id=cls.id,
        cohort_id=cohort.id,
        mode_id=mode.id,
        offering_id=offering.id,
        facilitator=facilitator,
    )


@pytest.fixture
def student(make_user, scenario):
    return make_user("student", "student@example.com", "Sam", "Student", student_id="S-0001", cohort_id=scenario.cohort_id)


@pytest.fixture
def offering_payload(scenario):
    """Builds a valid offering payload for the scenario, with overrides."""
    def _payload(**overrides):
        payload = {
            "module_id": scenario.module_id,
            "class_id": scenario.class_id,
            "cohort_id": scenario.cohort_id,
            "facilitator_id": scenario.facilitator.record_id,
            "mode_id": scenario.mode_id,
            "trimester": "2",
            "intake_period": "HT1",
            "start_date": "2024-05-01",
            "end_date": "2024-08-01",
        }
        payload.update(overrides)
        return payload
    return _payload
