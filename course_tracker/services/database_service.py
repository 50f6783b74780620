# /course-tracker/course_tracker/services/database_service.py

"""
The single entry point services use to reach the entity store.

`DatabaseService` delegates every query to a specialist SQL repository and
owns the unit of work: repositories only flush, and `transaction()` commits
on success or rolls everything back on any exception. Whatever runs inside
one `transaction()` block is persisted atomically or not at all.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator, Iterator, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

# --- Core Database Setup ---
from ..db.database import get_db

# --- Repository Imports ---
from .database_helpers.academic_repository_sql import AcademicRepositorySQL
from .database_helpers.notification_repository_sql import NotificationRepositorySQL
from .database_helpers.offering_activity_repository_sql import OfferingActivityRepositorySQL
from .database_helpers.user_repository_sql import UserRepositorySQL

logger = logging.getLogger(__name__)


class DatabaseService:
    def __init__(self, db_session: Session):
        self.db = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.academic_repo = AcademicRepositorySQL(db_session)
        self.offering_repo = OfferingActivityRepositorySQL(db_session)
        self.notification_repo = NotificationRepositorySQL(db_session)

    # --- UNIT OF WORK ---
    @contextmanager
    def transaction(self) -> Iterator["DatabaseService"]:
        """Commits everything written inside the block, or nothing."""
        try:
            yield self
            self.db.commit()
        except Exception:
            logger.debug("Rolling back transaction", exc_info=True)
            self.db.rollback()
            raise

    # --- USER & ROLE RECORD METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: int): return self.user_repo.get_user_by_id(user_id)
    def get_user_by_email(self, email: str): return self.user_repo.get_user_by_email(email)
    def add_user(self, record: Dict): return self.user_repo.add_user(record)
    def update_user(self, user, data: Dict): return self.user_repo.update_user(user, data)
    def delete_user(self, user) -> int: return self.user_repo.delete_user(user)
    def list_users(self, role: Optional[str], is_active: Optional[bool], offset: int, limit: int) -> Tuple[List, int]:
        return self.user_repo.list_users(role=role, is_active=is_active, offset=offset, limit=limit)
    def get_active_manager_user_ids(self) -> List[int]: return self.user_repo.get_active_manager_user_ids()
    def add_role_record(self, role: str, record: Dict): return self.user_repo.add_role_record(role, record)
    def get_role_record(self, role: str, user_id: int): return self.user_repo.get_role_record(role, user_id)
    def count_role_records(self, user_id: int) -> int: return self.user_repo.count_role_records(user_id)
    def get_facilitator_by_id(self, facilitator_id: int): return self.user_repo.get_facilitator_by_id(facilitator_id)
    def get_facilitator_by_employee_id(self, employee_id: str): return self.user_repo.get_facilitator_by_employee_id(employee_id)
    def get_student_by_student_id(self, student_id: str): return self.user_repo.get_student_by_student_id(student_id)
    def count_students_in_cohort(self, cohort_id: int) -> int: return self.user_repo.count_students_in_cohort(cohort_id)
    def list_active_facilitators(self) -> List[Tuple]: return self.user_repo.list_active_facilitators()

    # --- REFERENCE DATA METHODS (DELEGATED) ---
    def get_academic(self, entity: str, entity_id: int): return self.academic_repo.get(entity, entity_id)
    def get_academic_by_key(self, entity: str, value: str): return self.academic_repo.get_by_natural_key(entity, value)
    def list_academic(self, entity: str, active_only: bool = False) -> List: return self.academic_repo.list_all(entity, active_only)
    def add_academic(self, entity: str, record: Dict): return self.academic_repo.add(entity, record)
    def update_academic(self, obj, data: Dict): return self.academic_repo.update(obj, data)
    def delete_academic(self, obj) -> None: self.academic_repo.delete(obj)
    def count_academic_dependents(self, entity: str, entity_id: int) -> Dict[str, int]: return self.academic_repo.count_dependents(entity, entity_id)

    # --- COURSE OFFERING METHODS (DELEGATED) ---
    def get_offering_by_id(self, offering_id: int): return self.offering_repo.get_offering_by_id(offering_id)
    def find_active_offering_by_key(self, key: Dict, exclude_id: Optional[int] = None):
        return self.offering_repo.find_active_offering_by_key(exclude_id=exclude_id, **key)
    def add_offering(self, record: Dict): return self.offering_repo.add_offering(record)
    def update_offering(self, offering, data: Dict): return self.offering_repo.update_offering(offering, data)
    def delete_offering(self, offering) -> None: self.offering_repo.delete_offering(offering)
    def list_offerings(self, filters: Dict, offset: int, limit: int, facilitator_id: Optional[int] = None, cohort_id: Optional[int] = None):
        return self.offering_repo.list_offerings(filters, offset, limit, facilitator_id=facilitator_id, cohort_id=cohort_id)
    def count_offerings_for_facilitator(self, facilitator_id: int) -> int: return self.offering_repo.count_offerings_for_facilitator(facilitator_id)

    # --- ACTIVITY TRACKER METHODS (DELEGATED) ---
    def get_activity_by_id(self, activity_id: int): return self.offering_repo.get_activity_by_id(activity_id)
    def get_activity_for_week(self, allocation_id: int, week_number: int, for_update: bool = False):
        return self.offering_repo.get_activity_for_week(allocation_id, week_number, for_update=for_update)
    def add_activity(self, record: Dict): return self.offering_repo.add_activity(record)
    def update_activity(self, activity, data: Dict): return self.offering_repo.update_activity(activity, data)
    def delete_activity(self, activity) -> None: self.offering_repo.delete_activity(activity)
    def list_activities(self, allocation_id: Optional[int], week_number: Optional[int], offset: int, limit: int, facilitator_id: Optional[int] = None):
        return self.offering_repo.list_activities(allocation_id, week_number, offset, limit, facilitator_id=facilitator_id)
    def get_activities_for_offering(self, allocation_id: int) -> List: return self.offering_repo.get_activities_for_offering(allocation_id)
    def count_activities_for_offering(self, allocation_id: int) -> int: return self.offering_repo.count_activities_for_offering(allocation_id)

    # --- NOTIFICATION METHODS (DELEGATED) ---
    def add_notification(self, record: Dict): return self.notification_repo.add_notification(record)
    def get_notification_for_user(self, notification_id: int, user_id: int): return self.notification_repo.get_notification_for_user(notification_id, user_id)
    def list_notifications_for_user(self, user_id: int, is_read: Optional[bool], notification_type: Optional[str], offset: int, limit: int):
        return self.notification_repo.list_notifications_for_user(user_id, is_read, notification_type, offset, limit)
    def mark_notification_read(self, notification): return self.notification_repo.mark_read(notification)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a request-scoped DatabaseService."""
    yield DatabaseService(db_session=db)
