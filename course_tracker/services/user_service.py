# /course-tracker/course_tracker/services/user_service.py

"""
Business logic for users and their role records.

A user and its role record are always created together and removed together:
the role record is what gives a user any access at all, so a user without
one would be a dead identity.
"""

import logging
from typing import Any, Dict, List, Tuple

from ..core.errors import NotFoundError, ReferentialIntegrityError, ValidationError
from ..models import user_model
from ..models.common_model import Page
from .authorization_service import (
    Operation, ResourceType, ensure_user_visible, load_role_record, resolve_scope,
)
from .database_service import DatabaseService
from .validation_service import ConsistencyEnforcer

logger = logging.getLogger(__name__)


def to_profile(role: str, record) -> user_model.RoleProfile:
    return user_model.PROFILE_MODELS[role].model_validate(record)


def add_user_with_profile(user_payload: Any, profile_payload: Dict[str, Any], db: DatabaseService) -> Tuple:
    """
    Validates and writes a user and then its role record, switching on the
    user's role. Must run inside `db.transaction()`; returns the ORM rows.
    """
    enforcer = ConsistencyEnforcer(db)
    user_result = enforcer.validate("user", user_payload)
    user = db.add_user(user_result.data)

    role = user.role
    profile_result = enforcer.validate(role, {**profile_payload, "user_id": user.id})
    record = db.add_role_record(role, profile_result.data)
    logger.info("Created %s user %s with role record %s", role, user.id, record.id)
    return user, record


def register_user(
    registration: user_model.UserRegistration,
    db: DatabaseService,
    caller: user_model.Caller,
) -> user_model.RegisteredUser:
    resolve_scope(caller, ResourceType.USER, Operation.CREATE, db)
    if registration.profile.role != registration.user.role.value:
        raise ValidationError([{
            "field": "profile.role",
            "message": f"Profile is for '{registration.profile.role}' but the user role is '{registration.user.role.value}'.",
        }])

    with db.transaction():
        user, record = add_user_with_profile(
            registration.user,
            registration.profile.model_dump(exclude_unset=True),
            db,
        )
    return user_model.RegisteredUser(user=user_model.User.model_validate(user), profile=to_profile(user.role, record))


def get_user(user_id: int, caller: user_model.Caller, db: DatabaseService) -> user_model.RegisteredUser:
    scope = resolve_scope(caller, ResourceType.USER, Operation.READ, db)
    ensure_user_visible(scope, user_id)
    user = db.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    record = db.get_role_record(user.role, user.id)
    return user_model.RegisteredUser(
        user=user_model.User.model_validate(user),
        profile=to_profile(user.role, record) if record is not None else None,
    )


def list_users(
    filters: user_model.UserFilter,
    caller: user_model.Caller,
    db: DatabaseService,
) -> Page[user_model.User]:
    resolve_scope(caller, ResourceType.USER, Operation.LIST, db)
    rows, total = db.list_users(
        role=filters.role.value if filters.role else None,
        is_active=filters.is_active,
        offset=filters.offset,
        limit=filters.limit,
    )
    return Page[user_model.User].build([user_model.User.model_validate(u) for u in rows], total, filters)


def update_user(
    user_id: int,
    update: user_model.UserUpdate,
    caller: user_model.Caller,
    db: DatabaseService,
) -> user_model.User:
    resolve_scope(caller, ResourceType.USER, Operation.UPDATE, db)
    with db.transaction():
        user = db.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.")
        result = ConsistencyEnforcer(db).validate("user", update, existing=user)
        db.update_user(user, result.data)
    return user_model.User.model_validate(user)


def delete_user(user_id: int, caller: user_model.Caller, db: DatabaseService) -> int:
    """
    Deletes a user and their role record. Returns the number of role records
    removed. A facilitator who still has offerings cannot be deleted.
    """
    resolve_scope(caller, ResourceType.USER, Operation.DELETE, db)
    with db.transaction():
        user = db.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.")
        if user.role == user_model.Role.FACILITATOR.value:
            record = db.get_role_record(user.role, user.id)
            if record is not None:
                offerings = db.count_offerings_for_facilitator(record.id)
                if offerings:
                    raise ReferentialIntegrityError(
                        f"Facilitator is still assigned to {offerings} course offering(s). Reassign them first."
                    )
        removed = db.delete_user(user)
    logger.info("Deleted user %s (%d role record removed)", user_id, removed)
    return removed


def list_facilitators(caller: user_model.Caller, db: DatabaseService) -> List[user_model.FacilitatorSummary]:
    """Active facilitators with their names, for any authenticated role."""
    load_role_record(caller, db)
    return [
        user_model.FacilitatorSummary(
            id=facilitator.id,
            user_id=user.id,
            employee_id=facilitator.employee_id,
            specialization=facilitator.specialization,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )
        for facilitator, user in db.list_active_facilitators()
    ]
