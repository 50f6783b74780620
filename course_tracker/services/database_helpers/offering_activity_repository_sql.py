# /course-tracker/course_tracker/services/database_helpers/offering_activity_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the CourseOffering and
ActivityTracker tables.

List queries take the authorization scope as explicit arguments
(`facilitator_id`, `cohort_id`) and apply it in SQL, so a narrowed listing
never loads rows the caller is not allowed to see. Activity scope is applied
through an explicit join to the parent offering.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select

from ...db.models.offering_models import ActivityTracker, CourseOffering
from .base_repository_sql import SQLRepository


class OfferingActivityRepositorySQL(SQLRepository):

    # --- Course Offering Methods ---

    def get_offering_by_id(self, offering_id: int) -> Optional[CourseOffering]:
        return self.db.get(CourseOffering, offering_id)

    def find_active_offering_by_key(
        self,
        module_id: int,
        class_id: int,
        cohort_id: int,
        trimester: str,
        intake_period: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[CourseOffering]:
        """Returns another active offering with the same delivery key, if any."""
        stmt = select(CourseOffering).where(
            CourseOffering.module_id == module_id,
            CourseOffering.class_id == class_id,
            CourseOffering.cohort_id == cohort_id,
            CourseOffering.trimester == trimester,
            CourseOffering.intake_period == intake_period,
            CourseOffering.is_active.is_(True),
        )
        if exclude_id is not None:
            stmt = stmt.where(CourseOffering.id != exclude_id)
        return self.db.scalars(stmt).first()

    def add_offering(self, record: Dict) -> CourseOffering:
        return self._add(CourseOffering, record)

    def update_offering(self, offering: CourseOffering, data: Dict) -> CourseOffering:
        return self._update(offering, data)

    def delete_offering(self, offering: CourseOffering) -> None:
        self._delete(offering)

    def list_offerings(
        self,
        filters: Dict[str, Any],
        offset: int,
        limit: int,
        facilitator_id: Optional[int] = None,
        cohort_id: Optional[int] = None,
    ) -> Tuple[List[CourseOffering], int]:
        """
        Lists offerings matching `filters` (column -> value, None means "any").
        `facilitator_id`/`cohort_id` are the caller's scope and always apply.
        """
        stmt = select(CourseOffering)
        for column, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(CourseOffering, column) == value)
        if facilitator_id is not None:
            stmt = stmt.where(CourseOffering.facilitator_id == facilitator_id)
        if cohort_id is not None:
            stmt = stmt.where(CourseOffering.cohort_id == cohort_id)
        stmt = stmt.order_by(CourseOffering.start_date.desc(), CourseOffering.id.desc())
        return self._page(stmt, offset, limit)

    def count_offerings_for_facilitator(self, facilitator_id: int) -> int:
        return self._count(CourseOffering, CourseOffering.facilitator_id == facilitator_id)

    # --- Activity Tracker Methods ---

    def get_activity_by_id(self, activity_id: int) -> Optional[ActivityTracker]:
        return self.db.get(ActivityTracker, activity_id)

    def get_activity_for_week(self, allocation_id: int, week_number: int, for_update: bool = False) -> Optional[ActivityTracker]:
        """
        Fetches the record for one (allocation, week) key. With `for_update`
        the row is locked for the rest of the transaction on databases that
        support row locks, so a concurrent submission for the same week waits
        instead of losing its update.
        """
        stmt = select(ActivityTracker).where(
            ActivityTracker.allocation_id == allocation_id,
            ActivityTracker.week_number == week_number,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).first()

    def add_activity(self, record: Dict) -> ActivityTracker:
        return self._add(ActivityTracker, record)

    def update_activity(self, activity: ActivityTracker, data: Dict) -> ActivityTracker:
        return self._update(activity, data)

    def delete_activity(self, activity: ActivityTracker) -> None:
        self._delete(activity)

    def list_activities(
        self,
        allocation_id: Optional[int],
        week_number: Optional[int],
        offset: int,
        limit: int,
        facilitator_id: Optional[int] = None,
    ) -> Tuple[List[ActivityTracker], int]:
        stmt = select(ActivityTracker).join(CourseOffering, ActivityTracker.allocation_id == CourseOffering.id)
        if allocation_id is not None:
            stmt = stmt.where(ActivityTracker.allocation_id == allocation_id)
        if week_number is not None:
            stmt = stmt.where(ActivityTracker.week_number == week_number)
        if facilitator_id is not None:
            stmt = stmt.where(CourseOffering.facilitator_id == facilitator_id)
        stmt = stmt.order_by(ActivityTracker.week_number.desc(), ActivityTracker.updated_at.desc(), ActivityTracker.id.desc())
        return self._page(stmt, offset, limit)

    def get_activities_for_offering(self, allocation_id: int) -> List[ActivityTracker]:
        stmt = (
            select(ActivityTracker)
            .where(ActivityTracker.allocation_id == allocation_id)
            .order_by(ActivityTracker.week_number)
        )
        return list(self.db.scalars(stmt).all())

    def count_activities_for_offering(self, allocation_id: int) -> int:
        return self._count(ActivityTracker, ActivityTracker.allocation_id == allocation_id)
