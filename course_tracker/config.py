# /course-tracker/course_tracker/config.py

"""
Runtime configuration for the course tracker, read once from the environment.

Every value has a local-development default so the service and the test suite
can start without any environment setup.
"""

import os

from dotenv import load_dotenv

# Values in a local .env file fill in anything the environment does not set.
load_dotenv()

# --- Persistence ---
# SQLite is the local default; deployments point this at PostgreSQL.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./course_tracker.db")

# --- Notification Queue ---
# When REDIS_URL is unset, notification intents are dropped (logged at debug).
REDIS_URL = os.getenv("REDIS_URL")
NOTIFICATION_QUEUE_NAME = os.getenv("NOTIFICATION_QUEUE_NAME", "course_tracker:notifications")
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "0.5"))

# --- Authorization ---
# "cohort": students read their own cohort's offerings. "none": students read nothing.
STUDENT_READ_SCOPE = os.getenv("STUDENT_READ_SCOPE", "cohort").lower()

# Lets an unauthenticated caller run the composite full-record creation.
# Only meant for seeding a fresh installation.
ALLOW_BOOTSTRAP_COMPOSITE = os.getenv("ALLOW_BOOTSTRAP_COMPOSITE", "false").lower() == "true"

# --- Listing ---
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
