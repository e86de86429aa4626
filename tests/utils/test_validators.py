from datetime import datetime, timezone

import pytest

from app.api.core.exceptions import ValidationError
from app.api.modules.v1.projects.models.project_model import Priority, ProjectStatus
from app.api.modules.v1.work_items.models.work_item_model import WorkItemStatus
from app.api.utils.validators import (
    validate_priority,
    validate_profile,
    validate_project,
    validate_project_status,
    validate_work_item,
    validate_work_item_status,
)


def test_validate_project_accepts_valid_attributes():
    validate_project(
        name="Apollo",
        priority="Medium",
        status="Active",
        start_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        deadline=datetime(2024, 2, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("name", ["", "   ", None, "x" * 201])
def test_validate_project_rejects_bad_name(name):
    with pytest.raises(ValidationError) as exc:
        validate_project(name=name)
    assert "name" in exc.value.errors


def test_validate_project_accepts_name_at_limit():
    validate_project(name="x" * 200)


def test_name_length_ignores_surrounding_whitespace():
    padded = "  " + "a" * 200 + " "

    validate_project(name=padded)
    validate_work_item(name=padded)
    validate_profile(full_name="  " + "a" * 100 + "  ")

    with pytest.raises(ValidationError) as exc:
        validate_work_item(name=" " + "a" * 201 + " ")
    assert "name" in exc.value.errors


def test_validate_project_rejects_deadline_before_start():
    with pytest.raises(ValidationError) as exc:
        validate_project(
            name="Apollo",
            start_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
            deadline=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
    assert "deadline" in exc.value.errors


def test_validate_project_compares_naive_and_aware_dates_as_utc():
    validate_project(
        name="Apollo",
        start_date=datetime(2024, 1, 1),
        deadline=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_validate_project_collects_every_violation():
    with pytest.raises(ValidationError) as exc:
        validate_project(name="", priority="Urgent", status="Archived")
    assert set(exc.value.errors) == {"name", "priority", "status"}


def test_validate_work_item_rejects_unknown_status():
    with pytest.raises(ValidationError) as exc:
        validate_work_item(name="Task", status="Archived")
    assert "status" in exc.value.errors


def test_validate_work_item_accepts_every_lifecycle_status():
    for status in WorkItemStatus:
        validate_work_item(name="Task", priority=Priority.LOW, status=status.value)


@pytest.mark.parametrize("value", ["Critical", "Major", "Medium", "Minor", "Low"])
def test_validate_priority_accepts_the_five_literals(value):
    assert validate_priority(value) == Priority(value)


@pytest.mark.parametrize("value", ["High", "medium", "", None])
def test_validate_priority_rejects_other_values(value):
    with pytest.raises(ValidationError):
        validate_priority(value)


def test_validate_work_item_status_returns_member():
    assert validate_work_item_status("InProgress") is WorkItemStatus.IN_PROGRESS
    assert validate_work_item_status(WorkItemStatus.DONE) is WorkItemStatus.DONE


def test_validate_work_item_status_rejects_archived():
    with pytest.raises(ValidationError) as exc:
        validate_work_item_status("Archived")
    assert "Archived" in exc.value.message


def test_validate_project_status():
    assert validate_project_status("Closed") is ProjectStatus.CLOSED
    with pytest.raises(ValidationError):
        validate_project_status("Archived")


@pytest.mark.parametrize(
    "full_name,experience,field",
    [
        ("", 3, "full_name"),
        ("x" * 101, 3, "full_name"),
        ("Eve", -1, "experience"),
        ("Eve", 101, "experience"),
    ],
)
def test_validate_profile_rejects(full_name, experience, field):
    with pytest.raises(ValidationError) as exc:
        validate_profile(full_name=full_name, experience=experience)
    assert field in exc.value.errors


def test_validate_profile_accepts_bounds():
    validate_profile(full_name="Eve", experience=0)
    validate_profile(full_name="x" * 100, experience=100)
