from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.api.modules.v1.projects.models.project_model import Project
from app.api.modules.v1.work_items.models.work_item_model import WorkItem


async def get_project_by_id(db: AsyncSession, project_id: int) -> Optional[Project]:
    """
    Fetch project by ID.

    Args:
        db: Database session
        project_id: Project id to fetch

    Returns:
        Project object if found, None otherwise
    """
    return await db.scalar(select(Project).where(Project.id == project_id))


async def count_project_work_items(db: AsyncSession, project_id: int) -> int:
    statement = select(func.count(WorkItem.id)).where(WorkItem.project_id == project_id)
    return (await db.execute(statement)).scalar_one()
