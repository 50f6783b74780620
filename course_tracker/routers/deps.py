# /course-tracker/course_tracker/routers/deps.py

"""
Request-scoped dependencies shared by the routers.

The course tracker does not authenticate anyone itself. The identity provider
in front of it verifies the caller and forwards the result as two headers,
`X-User-Id` and `X-User-Role`, which are turned into a `Caller` here.
"""

from typing import Optional

from fastapi import Depends, Header
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import AccessDenied
from ..models.user_model import Caller


def get_optional_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Optional[Caller]:
    """The caller, or None when the request carries no identity at all."""
    if x_user_id is None and x_user_role is None:
        return None
    try:
        return Caller(id=x_user_id, role=x_user_role)
    except PydanticValidationError:
        raise AccessDenied("Invalid caller identity headers.")


def get_current_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    if caller is None:
        raise AccessDenied("Authentication required.")
    return caller
