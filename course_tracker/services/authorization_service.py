# /course-tracker/course_tracker/services/authorization_service.py

"""
The authorization resolver: decides, for a caller and a kind of resource,
whether an operation is allowed and how far the visible record set must be
narrowed.

Resolution happens in two steps. `resolve_scope` runs before any record is
loaded and either raises `AccessDenied` or returns an `AccessScope` whose
filter fields (`facilitator_id`, `cohort_id`, `user_id`) list queries apply in
SQL. Once a single record has been loaded by id, the `ensure_*` helpers check
it against that scope. A record outside the scope raises `AccessDenied`, not
`NotFoundError`: existence is not hidden, only access is.

Rules:
- manager: unrestricted.
- facilitator: reads own offerings; reads and writes activity records of own
  offerings; reads reference data; reads own user record.
- student: reads own cohort's offerings (configurable); reads reference data;
  reads own user record.
- a caller whose user is missing, inactive, of another role, or without the
  matching role record is denied everything.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .. import config
from ..core.errors import AccessDenied
from ..models.user_model import Caller, Role
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    USER = "user"
    COHORT = "cohort"
    CLASS = "class"
    MODULE = "module"
    MODE = "mode"
    OFFERING = "offering"
    ACTIVITY = "activity"
    NOTIFICATION = "notification"
    FULL_RECORD = "full_record"


class Operation(str, Enum):
    READ = "read"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


REFERENCE_DATA = {ResourceType.COHORT, ResourceType.CLASS, ResourceType.MODULE, ResourceType.MODE}
READ_OPERATIONS = {Operation.READ, Operation.LIST}


@dataclass(frozen=True)
class AccessScope:
    """
    The outcome of a successful resolution. A filter field left as None means
    "no restriction on that dimension".
    """
    allowed: bool
    role: Optional[Role]
    user_id: Optional[int] = None
    facilitator_id: Optional[int] = None
    cohort_id: Optional[int] = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def is_bootstrap(self) -> bool:
        return self.role is None


def _deny(caller: Caller, resource_type: ResourceType, operation: Operation, reason: str = "") -> AccessDenied:
    logger.info(
        "Access denied: user=%s role=%s %s %s %s",
        caller.id, caller.role.value, operation.value, resource_type.value, reason,
    )
    return AccessDenied(reason or f"Access denied. A {caller.role.value} cannot {operation.value} {resource_type.value} records.")


def load_role_record(caller: Caller, db: DatabaseService):
    """
    Returns the caller's role record, or raises AccessDenied when the identity
    does not resolve to an active user with a record for the claimed role.
    """
    if caller is None:
        raise AccessDenied("Authentication required.")
    user = db.get_user_by_id(caller.id)
    if user is None or not user.is_active or user.role != caller.role.value:
        raise AccessDenied("Access denied. The caller is not an active user with this role.")
    record = db.get_role_record(caller.role.value, caller.id)
    if record is None:
        raise AccessDenied(f"Access denied. No {caller.role.value} record exists for this user.")
    return record


def resolve_scope(
    caller: Optional[Caller],
    resource_type: ResourceType,
    operation: Operation,
    db: DatabaseService,
) -> AccessScope:
    """Resolves the caller's scope for one operation on one kind of resource."""
    record = load_role_record(caller, db)

    if caller.role == Role.MANAGER:
        return AccessScope(allowed=True, role=caller.role, user_id=caller.id)

    if resource_type in REFERENCE_DATA:
        if operation in READ_OPERATIONS:
            return AccessScope(allowed=True, role=caller.role, user_id=caller.id)
        raise _deny(caller, resource_type, operation)

    if resource_type == ResourceType.USER and operation == Operation.READ:
        return AccessScope(allowed=True, role=caller.role, user_id=caller.id)

    if resource_type == ResourceType.NOTIFICATION and operation in (Operation.READ, Operation.LIST, Operation.UPDATE):
        return AccessScope(allowed=True, role=caller.role, user_id=caller.id)

    if caller.role == Role.FACILITATOR:
        if resource_type == ResourceType.OFFERING and operation in READ_OPERATIONS:
            return AccessScope(allowed=True, role=caller.role, user_id=caller.id, facilitator_id=record.id)
        if resource_type == ResourceType.ACTIVITY:
            return AccessScope(allowed=True, role=caller.role, user_id=caller.id, facilitator_id=record.id)
        raise _deny(caller, resource_type, operation)

    # Student: read-only, limited to the offerings of their own cohort.
    if resource_type == ResourceType.OFFERING and operation in READ_OPERATIONS:
        if config.STUDENT_READ_SCOPE == "cohort":
            return AccessScope(allowed=True, role=caller.role, user_id=caller.id, cohort_id=record.cohort_id)
        raise _deny(caller, resource_type, operation, "Access denied. Students cannot view offerings.")
    raise _deny(caller, resource_type, operation)


def resolve_composite_scope(caller: Optional[Caller], db: DatabaseService) -> AccessScope:
    """
    The composite full-record flow skips the per-entity checks of each step,
    so it is reserved for managers, or for an unauthenticated bootstrap call
    when that is explicitly enabled.
    """
    if caller is None:
        if config.ALLOW_BOOTSTRAP_COMPOSITE:
            logger.warning("Composite creation invoked through the bootstrap path")
            return AccessScope(allowed=True, role=None)
        raise AccessDenied("Authentication required.")
    return resolve_scope(caller, ResourceType.FULL_RECORD, Operation.CREATE, db)


# --- Per-record checks ---

def ensure_record_visible(scope: AccessScope, offering) -> None:
    """
    Checks one loaded offering against the scope. Activity records are checked
    through their parent offering.
    """
    if scope.facilitator_id is not None and offering.facilitator_id != scope.facilitator_id:
        raise AccessDenied("Access denied. This course offering is assigned to another facilitator.")
    if scope.cohort_id is not None and offering.cohort_id != scope.cohort_id:
        raise AccessDenied("Access denied. This course offering belongs to another cohort.")


def ensure_user_visible(scope: AccessScope, user_id: int) -> None:
    if not scope.is_manager and scope.user_id != user_id:
        raise AccessDenied("Access denied. You can only view your own user record.")
