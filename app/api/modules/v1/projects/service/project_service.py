"""
Project Services
Business logic for project operations with proper database integration
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.core.exceptions import NotFoundError, ValidationError
from app.api.db.database import transaction
from app.api.modules.v1.projects.models.project_model import Project, ProjectStatus
from app.api.modules.v1.projects.schemas.project_schema import ProjectCreate, ProjectUpdate
from app.api.modules.v1.projects.utils.project_utils import (
    count_project_work_items,
    get_project_by_id,
)
from app.api.modules.v1.users.models.users_model import User
from app.api.utils.datetime_utils import as_utc, utcnow
from app.api.utils.pagination import paginate
from app.api.utils.validators import (
    reject_null_required,
    validate_project,
    validate_project_status,
)

logger = logging.getLogger("app")


class ProjectService:
    """
    Service class for project-related business logic operations.

    This class encapsulates project creation, retrieval, updates, status
    changes and deletion. Role checks happen in the route dependencies.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the ProjectService with a database session.

        Args:
            db (AsyncSession): The database session for executing queries.
        """
        self.db = db

    async def create_project(self, data: ProjectCreate, creator: User) -> Project:
        """
        Create a new project owned by ``creator``.

        Args:
            data: Project creation data
            creator: Manager or admin creating the project

        Returns:
            Created Project object
        """
        project = Project(
            name=data.name.strip(),
            description=data.description,
            requirements=data.requirements,
            priority=data.priority,
            created_by_id=creator.id,
        )
        if data.start_date:
            project.start_date = as_utc(data.start_date)
        if data.deadline:
            project.deadline = as_utc(data.deadline)

        validate_project(
            name=project.name,
            priority=project.priority,
            start_date=project.start_date,
            deadline=project.deadline,
        )

        logger.info(f"Creating project '{project.name}' for user_id={creator.id}")

        async with transaction(self.db, "create project"):
            self.db.add(project)
        await self.db.refresh(project)

        logger.info(f"Created project with id={project.id}")
        return project

    async def list_projects(
        self,
        include_closed: bool = True,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        """
        List projects, newest first, with pagination.

        Args:
            include_closed: When False only Active projects are returned
            page: Page number
            limit: Items per page

        Returns:
            Dictionary with projects list and pagination metadata
        """
        logger.info(f"Listing projects include_closed={include_closed}, page={page}, limit={limit}")

        statement = select(Project)
        if not include_closed:
            statement = statement.where(Project.status == ProjectStatus.ACTIVE)

        projects, pagination = await paginate(
            self.db, statement, page, limit, Project.created_at.desc(), Project.id.desc()
        )
        return {"data": projects, **pagination}

    async def get_project(self, project_id: int) -> Project:
        project = await get_project_by_id(self.db, project_id)

        if not project:
            logger.warning(f"Project not found: project_id={project_id}")
            raise NotFoundError(f"Project {project_id} not found")

        return project

    async def update_project(self, project_id: int, data: ProjectUpdate) -> Project:
        """
        Update project with provided data.

        Only fields present in the payload are changed, and an explicit null
        clears ``description`` or ``requirements``. The merged result is
        validated as a whole, so moving the deadline before the existing start
        date is rejected.
        """
        project = await self.get_project(project_id)
        changes = data.model_dump(exclude_unset=True)
        reject_null_required(changes, ("name", "priority", "start_date", "deadline"), "Project")
        for key in ("start_date", "deadline"):
            if key in changes:
                changes[key] = as_utc(changes[key])
        if "name" in changes:
            changes["name"] = changes["name"].strip()

        merged = {
            "name": changes.get("name", project.name),
            "priority": changes.get("priority", project.priority),
            "start_date": changes.get("start_date", project.start_date),
            "deadline": changes.get("deadline", project.deadline),
        }
        validate_project(**merged)

        async with transaction(self.db, "update project"):
            for key, value in changes.items():
                setattr(project, key, value)
            project.updated_at = utcnow()
            self.db.add(project)
        await self.db.refresh(project)

        logger.info(f"Updated project_id={project_id}: {sorted(changes)}")
        return project

    async def change_status(self, project_id: int, new_status: str) -> Project:
        target = validate_project_status(new_status)
        project = await self.get_project(project_id)

        if project.status == target:
            return project

        async with transaction(self.db, "change project status"):
            project.status = target
            project.updated_at = utcnow()
            self.db.add(project)
        await self.db.refresh(project)

        logger.info(f"Project {project_id} is now {target.value}")
        return project

    async def delete_project(self, project_id: int) -> None:
        """
        Delete a project that has no work items.

        Raises:
            NotFoundError: project does not exist
            ValidationError: project still owns work items; close it instead
        """
        project = await self.get_project(project_id)

        work_items = await count_project_work_items(self.db, project_id)
        if work_items:
            message = (
                f"Project {project_id} still has {work_items} work items; "
                "close the project instead of deleting it"
            )
            logger.warning(message)
            raise ValidationError(message, errors={"project": [message]})

        async with transaction(self.db, "delete project"):
            await self.db.delete(project)

        logger.info(f"Deleted project_id={project_id}")
