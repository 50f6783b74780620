# /course-tracker/course_tracker/services/validation_service.py

"""
The consistency enforcer: the last gate between a caller's payload and the
entity store.

`ConsistencyEnforcer.validate` takes a raw payload (a mapping or an already
parsed Pydantic model) for one entity type and returns a `ValidationResult`
whose `data` is ready to be written as-is: enums reduced to their stored
values, passwords hashed, defaults that depend on other rows filled in.

Checks run in three stages, and the first failing stage raises:
1.  Field level, through the entity's Pydantic create or update contract.
    All failing fields are reported together in one `ValidationError`.
2.  Date ordering on the record as it will look after the write. When
    stage 1 fails, its error also carries the date-order entry for any
    dates that did parse.
3.  Cross-entity rules against the store: referenced rows exist and are
    active (`DanglingReference`), natural keys and the active offering tuple
    are unique, cohorts have room left (`ConstraintViolation`).

For activity records the (allocation, week) lookup decides between an insert
and a merge into the existing week. It reads the row with a lock, so it must
run inside the same transaction as the write that follows.
"""

import datetime
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ConstraintViolation, DanglingReference, ValidationError
from ..core.security import hash_password
from ..models.academic_model import (
    ClassCreate, ClassUpdate, CohortCreate, CohortUpdate,
    ModeCreate, ModeUpdate, ModuleCreate, ModuleUpdate,
)
from ..models.activity_model import ActivitySubmission, ActivityUpdate
from ..models.offering_model import OfferingCreate, OfferingUpdate
from ..models.user_model import (
    FacilitatorProfileCreate, ManagerProfileCreate, StudentProfileCreate,
    UserCreate, UserUpdate,
)
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

# entity type -> (create contract, update contract)
ENTITY_SCHEMAS: Dict[str, Tuple[Type[BaseModel], Optional[Type[BaseModel]]]] = {
    "user": (UserCreate, UserUpdate),
    "manager": (ManagerProfileCreate, None),
    "facilitator": (FacilitatorProfileCreate, None),
    "student": (StudentProfileCreate, None),
    "cohort": (CohortCreate, CohortUpdate),
    "class": (ClassCreate, ClassUpdate),
    "module": (ModuleCreate, ModuleUpdate),
    "mode": (ModeCreate, ModeUpdate),
    "offering": (OfferingCreate, OfferingUpdate),
    "activity": (ActivitySubmission, ActivityUpdate),
}

ROLE_ENTITIES = ("manager", "facilitator", "student")
DATED_ENTITIES = ("cohort", "offering")

# Optional columns an update may explicitly clear by sending null.
CLEARABLE_FIELDS = {"description", "notes", "due_date"}

DATE_FIELDS = ("start_date", "end_date")
_DATE = TypeAdapter(datetime.date)

# Offering foreign keys: payload field -> (reference table, whether it carries is_active).
OFFERING_REFERENCES = {
    "module_id": ("module", True),
    "class_id": ("class", False),
    "cohort_id": ("cohort", True),
    "mode_id": ("mode", False),
}


@dataclass(frozen=True)
class ValidationResult:
    """
    A payload that passed every check. `operation` is "insert", "update", or,
    for an activity whose week already has a record, "merge"; `target_id` is
    the row an update or merge applies to.
    """
    entity_type: str
    data: Dict[str, Any]
    operation: str = "insert"
    target_id: Optional[int] = None
    context: Dict[str, Any] = field(default_factory=dict)


def _store_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_store_value(v) for v in value]
    return value


def _field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "__root__"
        errors.append({"field": loc, "message": err["msg"]})
    return errors


class ConsistencyEnforcer:
    def __init__(self, db: DatabaseService):
        self.db = db

    def validate(self, entity_type: str, payload: Any, existing: Any = None) -> ValidationResult:
        """
        Validates one payload for `entity_type`. Pass the loaded ORM row as
        `existing` to validate a partial update of that row.
        """
        if entity_type not in ENTITY_SCHEMAS:
            raise ValueError(f"Unknown entity type '{entity_type}'.")

        raw = payload.model_dump(exclude_unset=True) if isinstance(payload, BaseModel) else dict(payload or {})
        # Role records are linked to their user by the caller, not by the contract.
        user_id = raw.pop("user_id", None) if entity_type in ROLE_ENTITIES else None

        data = self._parse(entity_type, raw, existing)
        self._check_dates(entity_type, data, existing)

        if entity_type == "user":
            return self._check_user(data, existing)
        if entity_type in ROLE_ENTITIES:
            return self._check_role_record(entity_type, data, user_id)
        if entity_type == "offering":
            return self._check_offering(data, existing)
        if entity_type == "activity":
            return self._check_activity(data, existing)
        return self._check_reference_data(entity_type, data, existing)

    # --- Stage 1: field level ---

    def _parse(self, entity_type: str, raw: Dict[str, Any], existing: Any) -> Dict[str, Any]:
        partial = existing is not None
        create_schema, update_schema = ENTITY_SCHEMAS[entity_type]
        schema = update_schema if partial else create_schema
        if schema is None:
            raise ValueError(f"'{entity_type}' records cannot be updated.")
        try:
            parsed = schema.model_validate(raw)
        except PydanticValidationError as e:
            errors = _field_errors(e)
            # Dates that parsed are still order-checked.
            failed = {err["field"] for err in errors}
            dates = {
                name: _DATE.validate_python(raw[name])
                for name in DATE_FIELDS
                if entity_type in DATED_ENTITIES and raw.get(name) is not None and name not in failed
            }
            errors.extend(self._date_order_errors(entity_type, dates, existing))
            logger.info("Rejected %s payload: %s", entity_type, [err["field"] for err in errors])
            raise ValidationError(errors) from e

        if partial:
            dumped = parsed.model_dump(exclude_unset=True)
            dumped = {k: v for k, v in dumped.items() if v is not None or k in CLEARABLE_FIELDS}
        else:
            dumped = parsed.model_dump(exclude_none=True)
        if entity_type in ROLE_ENTITIES:
            # The tag is implied by the table.
            dumped.pop("role", None)
        return {k: _store_value(v) for k, v in dumped.items()}

    # --- Stage 2: date ordering ---

    def _date_order_errors(self, entity_type: str, data: Dict[str, Any], existing: Any) -> List[Dict[str, str]]:
        if entity_type not in DATED_ENTITIES:
            return []
        start = data.get("start_date", getattr(existing, "start_date", None))
        end = data.get("end_date", getattr(existing, "end_date", None))
        if start is not None and end is not None and end <= start:
            return [{"field": "end_date", "message": "end_date must be after start_date."}]
        return []

    def _check_dates(self, entity_type: str, data: Dict[str, Any], existing: Any) -> None:
        errors = self._date_order_errors(entity_type, data, existing)
        if errors:
            raise ValidationError(errors)

    # --- Stage 3: cross-entity rules ---

    def _check_user(self, data: Dict[str, Any], existing: Any) -> ValidationResult:
        email = data.get("email")
        if email is not None:
            other = self.db.get_user_by_email(email)
            if other is not None and (existing is None or other.id != existing.id):
                raise ConstraintViolation("email", "A user with this email already exists.")
        if "password" in data:
            data["password"] = hash_password(data["password"])
        if existing is not None:
            return ValidationResult("user", data, "update", existing.id)
        return ValidationResult("user", data)

    def _check_role_record(self, role: str, data: Dict[str, Any], user_id: Optional[int]) -> ValidationResult:
        if user_id is None:
            raise ValidationError([{"field": "user_id", "message": "Field required"}])
        user = self.db.get_user_by_id(user_id)
        if user is None:
            raise DanglingReference("user_id", user_id)
        if user.role != role:
            raise ValidationError([{"field": "role", "message": f"User {user_id} has role '{user.role}', not '{role}'."}])
        if self.db.count_role_records(user_id):
            raise ConstraintViolation("user_id", "This user already has a role record.")

        if role == "facilitator" and data.get("employee_id") is not None:
            if self.db.get_facilitator_by_employee_id(data["employee_id"]) is not None:
                raise ConstraintViolation("employee_id", "A facilitator with this employee_id already exists.")

        if role == "student":
            if self.db.get_student_by_student_id(data["student_id"]) is not None:
                raise ConstraintViolation("student_id", "A student with this student_id already exists.")
            cohort = self._require_reference("cohort", "cohort_id", data["cohort_id"], must_be_active=True)
            if self.db.count_students_in_cohort(cohort.id) >= cohort.max_students:
                raise ConstraintViolation("cohort_id", f"Cohort '{cohort.name}' is full ({cohort.max_students} students).")

        data["user_id"] = user_id
        return ValidationResult(role, data)

    def _check_reference_data(self, entity_type: str, data: Dict[str, Any], existing: Any) -> ValidationResult:
        key = "code" if entity_type == "module" else "name"
        if key in data:
            other = self.db.get_academic_by_key(entity_type, data[key])
            if other is not None and (existing is None or other.id != existing.id):
                raise ConstraintViolation(key, f"A {entity_type} with this {key} already exists.")
        if entity_type == "cohort" and existing is not None and "max_students" in data:
            enrolled = self.db.count_students_in_cohort(existing.id)
            if data["max_students"] < enrolled:
                raise ConstraintViolation(
                    "max_students",
                    f"Cohort '{existing.name}' already has {enrolled} students; max_students cannot be lower.",
                )
        if existing is not None:
            return ValidationResult(entity_type, data, "update", existing.id)
        return ValidationResult(entity_type, data)

    def _check_offering(self, data: Dict[str, Any], existing: Any) -> ValidationResult:
        for field_name, (entity, has_active_flag) in OFFERING_REFERENCES.items():
            if field_name in data:
                self._require_reference(entity, field_name, data[field_name], must_be_active=has_active_flag)
        if "facilitator_id" in data:
            facilitator = self.db.get_facilitator_by_id(data["facilitator_id"])
            user = self.db.get_user_by_id(facilitator.user_id) if facilitator is not None else None
            if user is None or not user.is_active:
                raise DanglingReference("facilitator_id", data["facilitator_id"],
                                        f"Facilitator {data['facilitator_id']} does not exist or is inactive.")

        is_active = data.get("is_active", getattr(existing, "is_active", True))
        if is_active:
            key = {
                name: data.get(name, getattr(existing, name, None))
                for name in ("module_id", "class_id", "cohort_id", "trimester", "intake_period")
            }
            clash = self.db.find_active_offering_by_key(key, exclude_id=getattr(existing, "id", None))
            if clash is not None:
                raise ConstraintViolation(
                    "module_id,class_id,cohort_id,trimester,intake_period",
                    f"An active offering for this module, class, cohort, trimester and intake already exists (id {clash.id}).",
                )

        if existing is not None:
            return ValidationResult("offering", data, "update", existing.id)
        return ValidationResult("offering", data)

    def _check_activity(self, data: Dict[str, Any], existing: Any) -> ValidationResult:
        if existing is not None:
            return ValidationResult("activity", data, "update", existing.id)

        offering = self.db.get_offering_by_id(data["allocation_id"])
        if offering is None or not offering.is_active:
            raise DanglingReference("allocation_id", data["allocation_id"],
                                    f"Course offering {data['allocation_id']} does not exist or is inactive.")

        current = self.db.get_activity_for_week(data["allocation_id"], data["week_number"], for_update=True)
        if current is not None:
            logger.debug("Activity for offering %s week %s exists; merging", offering.id, data["week_number"])
            return ValidationResult("activity", data, "merge", current.id, {"offering": offering})

        data.setdefault("due_date", offering.start_date + datetime.timedelta(weeks=data["week_number"]))
        return ValidationResult("activity", data, "insert", None, {"offering": offering})

    def _require_reference(self, entity: str, field_name: str, target_id: int, must_be_active: bool = False):
        target = self.db.get_academic(entity, target_id)
        if target is None:
            raise DanglingReference(field_name, target_id, f"{entity.capitalize()} {target_id} does not exist.")
        if must_be_active and not target.is_active:
            raise DanglingReference(field_name, target_id, f"{entity.capitalize()} {target_id} is not active.")
        return target
