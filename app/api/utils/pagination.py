from typing import Any, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select


def calculate_pagination(total: int, page: int, limit: int) -> dict:
    """
    Calculate pagination metadata.

    Args:
        total: Total number of items
        page: Current page number
        limit: Items per page

    Returns:
        Dictionary with pagination metadata
    """
    total_pages = (total + limit - 1) // limit if total > 0 else 0

    return {"total": total, "page": page, "limit": limit, "total_pages": total_pages}


async def paginate(
    db: AsyncSession, statement, page: int, limit: int, *order_by
) -> Tuple[List[Any], dict]:
    """
    Run ``statement`` for one page and count the full result set.

    Returns:
        (rows on the requested page, pagination metadata)
    """
    count_statement = select(func.count()).select_from(statement.subquery())
    total = (await db.execute(count_statement)).scalar_one()

    offset = (page - 1) * limit
    result = await db.execute(statement.order_by(*order_by).offset(offset).limit(limit))
    items = list(result.scalars().all())

    return items, calculate_pagination(total, page, limit)
