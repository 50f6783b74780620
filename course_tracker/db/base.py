# /course-tracker/course_tracker/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic or `init_db` scans the metadata.

from .base_class import Base  # noqa: F401

from .models.user_models import User, Manager, Facilitator, Student  # noqa: F401
from .models.academic_models import Cohort, Class, Module, Mode  # noqa: F401
from .models.offering_models import CourseOffering, ActivityTracker  # noqa: F401
from .models.notification_models import Notification  # noqa: F401
