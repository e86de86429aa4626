import logging
import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type, TypeVar

from app.api.core.exceptions import ValidationError
from app.api.modules.v1.projects.models.project_model import Priority, ProjectStatus
from app.api.modules.v1.work_items.models.work_item_model import WorkItemStatus
from app.api.utils.datetime_utils import as_utc

logger = logging.getLogger("app")

NAME_MAX_LENGTH = 200
FULL_NAME_MAX_LENGTH = 100
MAX_EXPERIENCE_YEARS = 100

E = TypeVar("E", bound=Enum)


def is_strong_password(password: str) -> str:
    """Check password strength and return a human-readable error message.

    Returns an empty string when the password satisfies every rule, so the
    result can be used directly inside Pydantic validators.
    """
    errors: list[str] = []

    if len(password) < 8:
        errors.append("at least 8 characters")
    if not re.search(r"[A-Z]", password):
        errors.append("one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("one lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("one digit")
    if not re.search(r"[!@#$%^&*(),.?\":{}|<>]", password):
        errors.append("one special character")

    if errors:
        return "Password must contain: " + ", ".join(errors) + "."
    return ""


def _parse_enum(enum_cls: Type[E], value, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        message = f"'{value}' is not a valid {field}. Allowed values: {allowed}"
        raise ValidationError(message, errors={field: [message]})


def validate_priority(value) -> Priority:
    """Return the Priority member for ``value`` or raise ValidationError."""
    return _parse_enum(Priority, value, "priority")


def validate_work_item_status(value) -> WorkItemStatus:
    """Return the WorkItemStatus member for ``value`` or raise ValidationError."""
    return _parse_enum(WorkItemStatus, value, "status")


def validate_project_status(value) -> ProjectStatus:
    return _parse_enum(ProjectStatus, value, "status")


def _check_name(errors: Dict[str, List[str]], field: str, value: Optional[str], max_length: int):
    if value is None or not value.strip():
        errors.setdefault(field, []).append(f"{field} is required")
    elif len(value.strip()) > max_length:
        errors.setdefault(field, []).append(f"{field} must be at most {max_length} characters")


def _check_enum(errors: Dict[str, List[str]], enum_cls: Type[Enum], value, field: str):
    if value is None:
        return
    try:
        _parse_enum(enum_cls, value, field)
    except ValidationError as e:
        errors.update(e.errors)


def _raise_if_any(errors: Dict[str, List[str]], entity: str):
    if errors:
        logger.warning(f"{entity} validation failed: {errors}")
        raise ValidationError(f"Invalid {entity.lower()} data", errors=errors)


def reject_null_required(changes: Dict[str, object], required: Tuple[str, ...], entity: str) -> None:
    """
    Fail when a partial update sets a required field to null.

    Optional fields may be cleared with an explicit null; required ones may
    only be omitted.
    """
    errors: Dict[str, List[str]] = {}
    for field in required:
        if field in changes and changes[field] is None:
            errors.setdefault(field, []).append(f"{field} cannot be null")
    _raise_if_any(errors, entity)


def validate_project(
    *,
    name: Optional[str],
    priority=None,
    status=None,
    start_date: Optional[datetime] = None,
    deadline: Optional[datetime] = None,
) -> None:
    """
    Validate the attributes of a candidate project.

    Checks the name (required, at most 200 characters), the priority and status
    literals, and that the deadline does not fall before the start date.
    Collects every violation before raising.

    Raises:
        ValidationError: with a field -> messages map when any check fails
    """
    errors: Dict[str, List[str]] = {}
    _check_name(errors, "name", name, NAME_MAX_LENGTH)
    _check_enum(errors, Priority, priority, "priority")
    _check_enum(errors, ProjectStatus, status, "status")

    if start_date is not None and deadline is not None and as_utc(deadline) < as_utc(start_date):
        errors.setdefault("deadline", []).append("deadline must not be earlier than start_date")

    _raise_if_any(errors, "Project")


def validate_work_item(*, name: Optional[str], priority=None, status=None) -> None:
    """
    Validate the attributes of a candidate work item.

    Raises:
        ValidationError: name empty or too long, or an unknown priority/status literal
    """
    errors: Dict[str, List[str]] = {}
    _check_name(errors, "name", name, NAME_MAX_LENGTH)
    _check_enum(errors, Priority, priority, "priority")
    _check_enum(errors, WorkItemStatus, status, "status")
    _raise_if_any(errors, "WorkItem")


def validate_profile(*, full_name: Optional[str], experience: Optional[int] = None) -> None:
    errors: Dict[str, List[str]] = {}
    _check_name(errors, "full_name", full_name, FULL_NAME_MAX_LENGTH)

    if experience is not None and not 0 <= experience <= MAX_EXPERIENCE_YEARS:
        errors.setdefault("experience", []).append(
            f"experience must be between 0 and {MAX_EXPERIENCE_YEARS} years"
        )

    _raise_if_any(errors, "Profile")
