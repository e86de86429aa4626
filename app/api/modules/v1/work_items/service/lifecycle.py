"""
Work Item Lifecycle
Status state machine for work items.

    ToDo -> InProgress -> Review -> Done
                 ^          |  \
                 +----------+   -> Rejected

Done and Rejected are terminal. Forward moves belong to the assignee;
decisions on an item in Review belong to a reviewer (Manager or Admin).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from app.api.core.exceptions import AuthorizationError, ValidationError
from app.api.modules.v1.performance.models.performance_event_model import PerformanceEventKind
from app.api.modules.v1.users.models.users_model import User
from app.api.modules.v1.work_items.models.work_item_model import WorkItem, WorkItemStatus
from app.api.utils.datetime_utils import as_utc, utcnow
from app.api.utils.validators import validate_work_item_status


class Actor(str, Enum):
    ASSIGNEE = "assignee"
    REVIEWER = "reviewer"


TRANSITIONS: Dict[Tuple[WorkItemStatus, WorkItemStatus], Actor] = {
    (WorkItemStatus.TODO, WorkItemStatus.IN_PROGRESS): Actor.ASSIGNEE,
    (WorkItemStatus.IN_PROGRESS, WorkItemStatus.REVIEW): Actor.ASSIGNEE,
    (WorkItemStatus.REVIEW, WorkItemStatus.DONE): Actor.REVIEWER,
    (WorkItemStatus.REVIEW, WorkItemStatus.IN_PROGRESS): Actor.REVIEWER,
    (WorkItemStatus.REVIEW, WorkItemStatus.REJECTED): Actor.REVIEWER,
}


@dataclass(frozen=True)
class Transition:
    """Outcome of a lifecycle check; ``changed`` is False for a same-status no-op."""

    from_status: WorkItemStatus
    to_status: WorkItemStatus
    changed: bool
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    event: Optional[PerformanceEventKind] = None

    def values(self) -> dict:
        """Column values to write for this transition."""
        values = {"status": self.to_status, "updated_at": self.updated_at}
        if self.completed_at is not None:
            values["completed_at"] = self.completed_at
        return values

    def apply(self, work_item: WorkItem) -> WorkItem:
        if self.changed:
            for key, value in self.values().items():
                setattr(work_item, key, value)
        return work_item


def allowed_targets(status: WorkItemStatus) -> Tuple[WorkItemStatus, ...]:
    return tuple(target for source, target in TRANSITIONS if source == status)


def _check_actor(work_item: WorkItem, required: Actor, actor: User, target: WorkItemStatus):
    if required is Actor.REVIEWER:
        if not actor.is_reviewer:
            raise AuthorizationError(
                f"Only a manager or admin can move a work item from Review to {target.value}"
            )
        return

    if actor.id != work_item.assigned_to_id:
        raise AuthorizationError(
            f"Only the assignee can move a work item to {target.value}"
        )


def transition(
    work_item: WorkItem,
    new_status,
    actor: User,
    now: Optional[datetime] = None,
) -> Transition:
    """
    Check a status change against the lifecycle and describe its effects.

    The work item is not modified; callers write ``Transition.values()``
    (or call ``Transition.apply``) once the change is accepted.

    Args:
        work_item: Item whose status is changing
        new_status: Target status, as a WorkItemStatus or its literal value
        actor: Authenticated user requesting the change
        now: Clock override, defaults to the current UTC time

    Returns:
        Transition describing the new column values and the scoring event, if any

    Raises:
        ValidationError: unknown status literal, or a move outside the lifecycle
        AuthorizationError: the actor is not allowed to make this move
    """
    target = validate_work_item_status(new_status)
    current = WorkItemStatus(work_item.status)

    if target == current:
        return Transition(from_status=current, to_status=target, changed=False)

    required = TRANSITIONS.get((current, target))
    if required is None:
        message = f"Invalid status transition from {current.value} to {target.value}"
        raise ValidationError(message, errors={"status": [message]})

    _check_actor(work_item, required, actor, target)

    now = now or utcnow()
    completed_at = None
    event = None

    if target == WorkItemStatus.DONE:
        completed_at = now
        if now <= as_utc(work_item.deadline):
            event = PerformanceEventKind.APPROVED
        else:
            event = PerformanceEventKind.APPROVED_LATE
    elif target == WorkItemStatus.REJECTED:
        event = PerformanceEventKind.REJECTED

    return Transition(
        from_status=current,
        to_status=target,
        changed=True,
        updated_at=now,
        completed_at=completed_at,
        event=event,
    )
