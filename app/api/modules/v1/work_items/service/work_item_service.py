"""
Work Item Service
Creation, assignment, editing and status changes for work items.

Status changes are written with a compare-and-swap on ``WorkItem.version`` and
the assignee's profile is rescored in the same transaction.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.core.config import settings
from app.api.core.exceptions import (
    AuthorizationError,
    ConcurrencyConflict,
    NotFoundError,
    ValidationError,
)
from app.api.db.database import transaction
from app.api.modules.v1.performance.models.performance_event_model import PerformanceEvent
from app.api.modules.v1.performance.service.performance_service import PerformanceService
from app.api.modules.v1.projects.models.project_model import ProjectStatus
from app.api.modules.v1.projects.utils.project_utils import get_project_by_id
from app.api.modules.v1.users.models.users_model import User
from app.api.modules.v1.users.utils.user_utils import get_user_by_id
from app.api.modules.v1.work_items.models.work_item_model import WorkItem, WorkItemStatus
from app.api.modules.v1.work_items.schemas.work_item_schema import WorkItemCreate, WorkItemUpdate
from app.api.modules.v1.work_items.service.lifecycle import Transition, transition
from app.api.utils.datetime_utils import as_utc, utcnow
from app.api.utils.pagination import paginate
from app.api.utils.validators import (
    reject_null_required,
    validate_work_item,
    validate_work_item_status,
)

logger = logging.getLogger("app")

# The first attempt plus one automatic retry after a concurrent edit
STATUS_UPDATE_ATTEMPTS = 2


class WorkItemService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.performance = PerformanceService(db)

    async def _load(self, work_item_id: int) -> WorkItem:
        work_item = await self.db.scalar(select(WorkItem).where(WorkItem.id == work_item_id))
        if not work_item:
            raise NotFoundError(f"Work item {work_item_id} not found")
        return work_item

    async def _get_assignee(self, user_id: str) -> User:
        user = await get_user_by_id(self.db, user_id)
        if not user:
            message = f"User {user_id} not found"
            raise ValidationError(message, errors={"assigned_to_id": [message]})
        return user

    @staticmethod
    def _conflict(work_item: WorkItem) -> ConcurrencyConflict:
        logger.warning(
            f"Concurrent update on work_item_id={work_item.id}, "
            f"now version={work_item.version} status={work_item.status.value}"
        )
        return ConcurrencyConflict(
            f"Work item {work_item.id} was changed by another request "
            f"(now {work_item.status.value}, version {work_item.version}); refetch and retry"
        )

    async def get_work_item(self, work_item_id: int, actor: User) -> WorkItem:
        """
        Fetch a work item the actor is allowed to see.

        Reviewers see every item; employees only the items assigned to them.
        """
        work_item = await self._load(work_item_id)
        if not actor.is_reviewer and work_item.assigned_to_id != actor.id:
            logger.warning(f"user_id={actor.id} denied access to work_item_id={work_item_id}")
            raise AuthorizationError("You can only access work items assigned to you")
        return work_item

    async def list_work_items(
        self,
        actor: User,
        project_id: Optional[int] = None,
        status: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        """
        List work items visible to ``actor``, newest first.

        Employees are always restricted to their own items, whatever
        ``assigned_to_id`` says.
        """
        statement = select(WorkItem)

        if not actor.is_reviewer:
            statement = statement.where(WorkItem.assigned_to_id == actor.id)
        elif assigned_to_id:
            statement = statement.where(WorkItem.assigned_to_id == assigned_to_id)

        if project_id is not None:
            statement = statement.where(WorkItem.project_id == project_id)
        if status is not None:
            statement = statement.where(WorkItem.status == validate_work_item_status(status))

        work_items, pagination = await paginate(
            self.db, statement, page, limit, WorkItem.created_at.desc(), WorkItem.id.desc()
        )
        return {"data": work_items, **pagination}

    async def create_work_item(self, data: WorkItemCreate, creator: User) -> WorkItem:
        """
        Create a work item in ToDo and assign it.

        The project must be Active and the assignee eligible for more work.
        The deadline defaults to seven days after creation.

        Raises:
            NotFoundError: project does not exist
            ValidationError: invalid attributes, closed project or ineligible assignee
        """
        validate_work_item(name=data.name, priority=data.priority)

        project = await get_project_by_id(self.db, data.project_id)
        if not project:
            raise NotFoundError(f"Project {data.project_id} not found")
        if project.status != ProjectStatus.ACTIVE:
            message = "Work items can only be added to active projects"
            raise ValidationError(message, errors={"project_id": [message]})

        assignee = await self._get_assignee(data.assigned_to_id)

        async with transaction(self.db, "create work item"):
            await self.performance.check_assignment_eligibility(assignee)
            now = utcnow()
            deadline = as_utc(data.deadline) or now + timedelta(days=settings.DEFAULT_WORK_ITEM_DAYS)
            work_item = WorkItem(
                name=data.name.strip(),
                description=data.description,
                comments=data.comments,
                priority=data.priority,
                status=WorkItemStatus.TODO,
                project_id=project.id,
                assigned_to_id=assignee.id,
                created_by_id=creator.id,
                deadline=deadline,
                created_at=now,
                updated_at=now,
            )
            self.db.add(work_item)
            await self.db.flush()
            await self.performance.refresh_workload(assignee.id)

        await self.db.refresh(work_item)
        logger.info(
            f"Created work_item_id={work_item.id} in project_id={project.id} "
            f"for user_id={assignee.id}"
        )
        return work_item

    async def update_work_item(self, work_item_id: int, data: WorkItemUpdate) -> WorkItem:
        """
        Edit a work item's details or reassign it.

        Status is not editable here. An explicit null clears ``description``
        or ``comments``. Reassignment is limited to open items, re-checks
        eligibility and rescales both users' workload.
        """
        work_item = await self._load(work_item_id)
        changes = data.model_dump(exclude_unset=True)
        reject_null_required(
            changes, ("name", "priority", "deadline", "assigned_to_id"), "WorkItem"
        )
        if "deadline" in changes:
            changes["deadline"] = as_utc(changes["deadline"])
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        validate_work_item(
            name=changes.get("name", work_item.name),
            priority=changes.get("priority", work_item.priority),
        )

        previous_assignee_id = work_item.assigned_to_id
        new_assignee_id = changes.get("assigned_to_id", previous_assignee_id)
        reassigning = new_assignee_id != previous_assignee_id

        if reassigning and not work_item.is_open:
            message = f"A {work_item.status.value} work item cannot be reassigned"
            raise ValidationError(message, errors={"assigned_to_id": [message]})

        if reassigning:
            assignee = await self._get_assignee(new_assignee_id)

        async with transaction(self.db, "update work item"):
            if reassigning:
                await self.performance.lock_profiles(previous_assignee_id, new_assignee_id)
                await self.performance.check_assignment_eligibility(assignee)

            for key, value in changes.items():
                setattr(work_item, key, value)
            work_item.version = WorkItem.version + 1
            work_item.updated_at = utcnow()
            self.db.add(work_item)
            await self.db.flush()

            if reassigning:
                await self.performance.refresh_workload(previous_assignee_id)
                await self.performance.refresh_workload(new_assignee_id)

        await self.db.refresh(work_item)
        if reassigning:
            logger.info(
                f"Reassigned work_item_id={work_item_id} "
                f"from user_id={previous_assignee_id} to user_id={new_assignee_id}"
            )
        logger.info(f"Updated work_item_id={work_item_id}: {sorted(changes)}")
        return work_item

    async def _compare_and_swap(
        self,
        work_item_id: int,
        seen_version: int,
        change: Transition,
        comments: Optional[str],
    ) -> bool:
        values = change.values()
        if comments is not None:
            values["comments"] = comments

        statement = (
            update(WorkItem)
            .where(WorkItem.id == work_item_id, WorkItem.version == seen_version)
            .values(**values, version=WorkItem.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(statement)
        return result.rowcount == 1

    async def update_status(
        self,
        work_item_id: int,
        new_status: str,
        actor: User,
        comments: Optional[str] = None,
        version: Optional[int] = None,
    ) -> WorkItem:
        """
        Move a work item through its lifecycle and rescore the assignee.

        The status write only succeeds if the row still has the version this
        request read. When the client supplies ``version`` a mismatch is an
        immediate conflict. Otherwise the item is re-read once and the change
        retried, provided its status did not move in the meantime.

        Args:
            work_item_id: Item to update
            new_status: Target status literal
            actor: Authenticated user making the change
            comments: Optional comment stored with the change
            version: Row version the client last saw

        Returns:
            The updated work item (unchanged for a same-status request)

        Raises:
            ValidationError: unknown literal or illegal transition
            AuthorizationError: actor may not make this move
            ConcurrencyConflict: the item changed underneath this request
        """
        target = validate_work_item_status(new_status)
        work_item = await self.get_work_item(work_item_id, actor)

        if version is not None and version != work_item.version:
            raise self._conflict(work_item)

        for attempt in range(1, STATUS_UPDATE_ATTEMPTS + 1):
            change = transition(work_item, target, actor)
            if not change.changed:
                logger.info(f"work_item_id={work_item_id} already {target.value}, nothing to do")
                return work_item

            seen_version = work_item.version
            assignee_id = work_item.assigned_to_id

            async with transaction(self.db, "update work item status"):
                swapped = await self._compare_and_swap(
                    work_item_id, seen_version, change, comments
                )
                if swapped:
                    if change.event:
                        await self.performance.record_event(
                            assignee_id, work_item_id, change.event
                        )
                    await self.performance.refresh_workload(assignee_id)

            await self.db.refresh(work_item)

            if swapped:
                logger.info(
                    f"work_item_id={work_item_id} moved {change.from_status.value} -> "
                    f"{change.to_status.value} by user_id={actor.id}"
                )
                return work_item

            if version is not None or work_item.status != change.from_status:
                raise self._conflict(work_item)

            logger.info(
                f"work_item_id={work_item_id} edited concurrently, "
                f"retrying status update (attempt {attempt})"
            )

        raise self._conflict(work_item)

    async def delete_work_item(self, work_item_id: int) -> None:
        """Delete a work item; its performance events are kept, unlinked."""
        work_item = await self._load(work_item_id)
        assignee_id = work_item.assigned_to_id

        async with transaction(self.db, "delete work item"):
            await self.db.execute(
                update(PerformanceEvent)
                .where(PerformanceEvent.work_item_id == work_item_id)
                .values(work_item_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.delete(work_item)
            await self.db.flush()
            await self.performance.refresh_workload(assignee_id)

        logger.info(f"Deleted work_item_id={work_item_id}")
