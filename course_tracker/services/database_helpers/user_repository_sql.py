# /course-tracker/course_tracker/services/database_helpers/user_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the User table and the
three role tables (Manager, Facilitator, Student). It is the direct interface
to the database for identity data.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, select

from ...db.models.notification_models import Notification
from ...db.models.user_models import Facilitator, Manager, Student, User
from .base_repository_sql import SQLRepository

ROLE_TABLES = {"manager": Manager, "facilitator": Facilitator, "student": Student}


class UserRepositorySQL(SQLRepository):

    # --- User Methods ---

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == email)).first()

    def add_user(self, record: Dict) -> User:
        """Creates a new User row. `record['password']` must already be hashed."""
        return self._add(User, record)

    def update_user(self, user: User, data: Dict) -> User:
        return self._update(user, data)

    def delete_user(self, user: User) -> int:
        """
        Deletes a user together with their role record and their inbox.
        Returns the number of role records removed (0 or 1).

        The role tables also cascade at the database level; the explicit
        deletes keep the session free of stale role objects.
        """
        role_table = ROLE_TABLES[user.role]
        removed = self.db.execute(delete(role_table).where(role_table.user_id == user.id)).rowcount
        self.db.execute(delete(Notification).where(Notification.user_id == user.id))
        self._delete(user)
        return removed

    def list_users(self, role: Optional[str], is_active: Optional[bool], offset: int, limit: int) -> Tuple[List[User], int]:
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        if is_active is not None:
            stmt = stmt.where(User.is_active == is_active)
        return self._page(stmt.order_by(User.created_at.desc(), User.id.desc()), offset, limit)

    def get_active_manager_user_ids(self) -> List[int]:
        stmt = (
            select(User.id)
            .join(Manager, Manager.user_id == User.id)
            .where(User.is_active.is_(True))
            .order_by(User.id)
        )
        return list(self.db.scalars(stmt).all())

    # --- Role Record Methods ---

    def add_role_record(self, role: str, record: Dict):
        return self._add(ROLE_TABLES[role], record)

    def get_role_record(self, role: str, user_id: int):
        """Fetches the role record of `role` for `user_id`, or None."""
        table = ROLE_TABLES[role]
        return self.db.scalars(select(table).where(table.user_id == user_id)).first()

    def count_role_records(self, user_id: int) -> int:
        return sum(self._count(table, table.user_id == user_id) for table in ROLE_TABLES.values())

    def get_facilitator_by_id(self, facilitator_id: int) -> Optional[Facilitator]:
        return self.db.get(Facilitator, facilitator_id)

    def get_facilitator_by_employee_id(self, employee_id: str) -> Optional[Facilitator]:
        return self.db.scalars(select(Facilitator).where(Facilitator.employee_id == employee_id)).first()

    def get_student_by_student_id(self, student_id: str) -> Optional[Student]:
        """Global lookup by the external student number, unique across the system."""
        return self.db.scalars(select(Student).where(Student.student_id == student_id)).first()

    def count_students_in_cohort(self, cohort_id: int) -> int:
        return self._count(Student, Student.cohort_id == cohort_id)

    def list_active_facilitators(self) -> List[Tuple[Facilitator, User]]:
        stmt = (
            select(Facilitator, User)
            .join(User, Facilitator.user_id == User.id)
            .where(User.is_active.is_(True))
            .order_by(User.last_name, User.first_name)
        )
        return [(f, u) for f, u in self.db.execute(stmt).all()]
