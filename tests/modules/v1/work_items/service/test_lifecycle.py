from datetime import datetime, timedelta, timezone

import pytest

from app.api.core.exceptions import AuthorizationError, ValidationError
from app.api.modules.v1.performance.models.performance_event_model import PerformanceEventKind
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.modules.v1.work_items.models.work_item_model import WorkItem, WorkItemStatus
from app.api.modules.v1.work_items.service.lifecycle import allowed_targets, transition

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def assignee():
    return User(id="employee-1", email="eve@example.com", role=UserRole.EMPLOYEE)


@pytest.fixture
def colleague():
    return User(id="employee-2", email="oscar@example.com", role=UserRole.EMPLOYEE)


@pytest.fixture
def reviewer():
    return User(id="manager-1", email="mary@example.com", role=UserRole.MANAGER)


def make_item(status, deadline=None):
    return WorkItem(
        id=1,
        name="Task",
        project_id=1,
        assigned_to_id="employee-1",
        created_by_id="manager-1",
        status=status,
        deadline=deadline or NOW + timedelta(days=2),
        updated_at=NOW - timedelta(days=1),
    )


@pytest.mark.parametrize(
    "current,target,actor_name",
    [
        (WorkItemStatus.TODO, WorkItemStatus.IN_PROGRESS, "assignee"),
        (WorkItemStatus.IN_PROGRESS, WorkItemStatus.REVIEW, "assignee"),
        (WorkItemStatus.REVIEW, WorkItemStatus.DONE, "reviewer"),
        (WorkItemStatus.REVIEW, WorkItemStatus.IN_PROGRESS, "reviewer"),
        (WorkItemStatus.REVIEW, WorkItemStatus.REJECTED, "reviewer"),
    ],
)
def test_allowed_transitions(request, current, target, actor_name):
    actor = request.getfixturevalue(actor_name)
    change = transition(make_item(current), target.value, actor, now=NOW)

    assert change.changed
    assert change.from_status == current
    assert change.to_status == target
    assert change.updated_at == NOW


@pytest.mark.parametrize(
    "current,target",
    [
        (WorkItemStatus.TODO, WorkItemStatus.DONE),
        (WorkItemStatus.TODO, WorkItemStatus.REVIEW),
        (WorkItemStatus.IN_PROGRESS, WorkItemStatus.DONE),
        (WorkItemStatus.DONE, WorkItemStatus.IN_PROGRESS),
        (WorkItemStatus.REJECTED, WorkItemStatus.TODO),
        (WorkItemStatus.DONE, WorkItemStatus.REJECTED),
    ],
)
def test_out_of_sequence_transitions_are_rejected(reviewer, current, target):
    with pytest.raises(ValidationError) as exc:
        transition(make_item(current), target, reviewer, now=NOW)
    assert f"from {current.value} to {target.value}" in exc.value.message


def test_unknown_literal_is_a_validation_error(assignee):
    item = make_item(WorkItemStatus.TODO)
    with pytest.raises(ValidationError):
        transition(item, "Archived", assignee, now=NOW)
    assert item.status == WorkItemStatus.TODO


def test_same_status_is_a_noop(assignee):
    item = make_item(WorkItemStatus.IN_PROGRESS)
    change = transition(item, "InProgress", assignee, now=NOW)

    assert not change.changed
    assert change.event is None
    assert change.apply(item).updated_at == NOW - timedelta(days=1)


def test_employee_cannot_approve_own_review(assignee):
    with pytest.raises(AuthorizationError):
        transition(make_item(WorkItemStatus.REVIEW), WorkItemStatus.DONE, assignee, now=NOW)


def test_manager_cannot_start_or_submit(reviewer):
    with pytest.raises(AuthorizationError):
        transition(make_item(WorkItemStatus.TODO), WorkItemStatus.IN_PROGRESS, reviewer, now=NOW)
    with pytest.raises(AuthorizationError):
        transition(make_item(WorkItemStatus.IN_PROGRESS), WorkItemStatus.REVIEW, reviewer, now=NOW)


def test_employee_cannot_move_someone_elses_item(colleague):
    with pytest.raises(AuthorizationError):
        transition(make_item(WorkItemStatus.TODO), WorkItemStatus.IN_PROGRESS, colleague, now=NOW)


def test_admin_can_review():
    admin = User(id="admin-1", email="admin@example.com", role=UserRole.ADMIN)
    change = transition(make_item(WorkItemStatus.REVIEW), WorkItemStatus.REJECTED, admin, now=NOW)
    assert change.event == PerformanceEventKind.REJECTED


def test_done_on_time_is_approved_and_sets_completed_at(reviewer):
    change = transition(make_item(WorkItemStatus.REVIEW), WorkItemStatus.DONE, reviewer, now=NOW)

    assert change.event == PerformanceEventKind.APPROVED
    assert change.completed_at == NOW


def test_done_exactly_at_deadline_counts_as_on_time(reviewer):
    item = make_item(WorkItemStatus.REVIEW, deadline=NOW)
    assert transition(item, WorkItemStatus.DONE, reviewer, now=NOW).event == (
        PerformanceEventKind.APPROVED
    )


def test_done_after_deadline_is_approved_late(reviewer):
    item = make_item(WorkItemStatus.REVIEW, deadline=NOW - timedelta(hours=1))
    change = transition(item, WorkItemStatus.DONE, reviewer, now=NOW)
    assert change.event == PerformanceEventKind.APPROVED_LATE


def test_naive_deadline_is_treated_as_utc(reviewer):
    item = make_item(WorkItemStatus.REVIEW, deadline=datetime(2024, 3, 1, 13, 0))
    assert transition(item, WorkItemStatus.DONE, reviewer, now=NOW).event == (
        PerformanceEventKind.APPROVED
    )


def test_send_back_has_no_scoring_event(reviewer):
    change = transition(
        make_item(WorkItemStatus.REVIEW), WorkItemStatus.IN_PROGRESS, reviewer, now=NOW
    )
    assert change.event is None
    assert change.completed_at is None


def test_transition_does_not_mutate_until_applied(assignee):
    item = make_item(WorkItemStatus.TODO)
    change = transition(item, WorkItemStatus.IN_PROGRESS, assignee, now=NOW)

    assert item.status == WorkItemStatus.TODO
    change.apply(item)
    assert item.status == WorkItemStatus.IN_PROGRESS
    assert item.updated_at == NOW


def test_terminal_states_have_no_targets():
    assert allowed_targets(WorkItemStatus.DONE) == ()
    assert allowed_targets(WorkItemStatus.REJECTED) == ()
    assert set(allowed_targets(WorkItemStatus.REVIEW)) == {
        WorkItemStatus.DONE,
        WorkItemStatus.IN_PROGRESS,
        WorkItemStatus.REJECTED,
    }
