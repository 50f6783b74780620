# /course-tracker/course_tracker/services/report_service.py

"""
Read-only reporting over the activity records of one course offering.

Both reports are scoped exactly like reading the activity records
themselves: a facilitator can only report on their own offerings.
"""

import logging
from typing import Optional

import pandas as pd

from ..db.models.offering_models import ACTIVITY_STATUS_FIELDS
from ..models.activity_model import OfferingActivitySummary, WeeklySummary
from ..models.user_model import Caller
from .authorization_service import Operation, ResourceType, ensure_record_visible, resolve_scope
from .database_service import DatabaseService
from .offering_service import load_offering

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "Week", "Attendance", "Formative One Grading", "Formative Two Grading", "Summative Grading",
    "Course Moderation", "Intranet Sync", "Grade Book Status", "Notes", "Submitted At", "Due Date",
]


def _rate(value) -> Optional[float]:
    return None if pd.isna(value) else round(float(value), 2)


def _load_activities(offering_id: int, caller: Caller, db: DatabaseService):
    scope = resolve_scope(caller, ResourceType.ACTIVITY, Operation.READ, db)
    offering = load_offering(offering_id, db)
    ensure_record_visible(scope, offering)
    return db.get_activities_for_offering(offering.id)


def summarize_offering_activity(offering_id: int, caller: Caller, db: DatabaseService) -> OfferingActivitySummary:
    """
    Per-week completion (share of the six status fields marked Done) and
    attendance (share of sessions attended), as percentages.
    """
    activities = _load_activities(offering_id, caller, db)
    if not activities:
        return OfferingActivitySummary(allocation_id=offering_id, weeks_reported=0, overall_completion_rate=0.0)

    df = pd.DataFrame([
        {
            "week_number": a.week_number,
            "sessions": len(a.attendance or []),
            "present": sum(1 for attended in (a.attendance or []) if attended),
            **{f: getattr(a, f) for f in ACTIVITY_STATUS_FIELDS},
        }
        for a in activities
    ])
    status_columns = list(ACTIVITY_STATUS_FIELDS)
    df["completion_rate"] = (df[status_columns] == "Done").sum(axis=1) / len(status_columns) * 100
    df["attendance_rate"] = df["present"] / df["sessions"].where(df["sessions"] > 0) * 100

    weeks = [
        WeeklySummary(
            week_number=int(row["week_number"]),
            attendance_rate=_rate(row["attendance_rate"]),
            completion_rate=_rate(row["completion_rate"]),
            submitted_at=activity.submitted_at,
        )
        for activity, row in zip(activities, df.to_dict("records"))
    ]
    total_sessions = int(df["sessions"].sum())
    overall_attendance = df["present"].sum() / total_sessions * 100 if total_sessions else None

    return OfferingActivitySummary(
        allocation_id=offering_id,
        weeks_reported=len(df),
        overall_completion_rate=_rate(df["completion_rate"].mean()),
        overall_attendance_rate=_rate(overall_attendance) if overall_attendance is not None else None,
        weeks=weeks,
    )


def export_activities_as_csv(offering_id: int, caller: Caller, db: DatabaseService) -> str:
    activities = _load_activities(offering_id, caller, db)

    export_data = [
        {
            "Week": a.week_number,
            "Attendance": f"{sum(1 for x in (a.attendance or []) if x)}/{len(a.attendance or [])}",
            "Formative One Grading": a.formative_one_grading,
            "Formative Two Grading": a.formative_two_grading,
            "Summative Grading": a.summative_grading,
            "Course Moderation": a.course_moderation,
            "Intranet Sync": a.intranet_sync,
            "Grade Book Status": a.grade_book_status,
            "Notes": a.notes or "",
            "Submitted At": a.submitted_at.isoformat() if a.submitted_at else "",
            "Due Date": a.due_date.isoformat() if a.due_date else "",
        }
        for a in activities
    ]
    df = pd.DataFrame(export_data) if export_data else pd.DataFrame(columns=CSV_COLUMNS)
    logger.info("Exported %d activity records for offering %s", len(export_data), offering_id)
    return df.to_csv(index=False)
