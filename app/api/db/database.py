import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.api.core.config import BASE_DIR, settings
from app.api.core.exceptions import DataAccessError

logger = logging.getLogger("app")

DB_HOST = settings.DB_HOST
DB_PORT = settings.DB_PORT
DB_USER = settings.DB_USER
DB_PASS = settings.DB_PASS
DB_NAME = settings.DB_NAME
DB_TYPE = settings.DB_TYPE


def get_db_url(test_mode: bool = False) -> str:
    """
    Constructs and returns the database URL for async SQLModel engines.
    """
    if DB_TYPE == "sqlite" or test_mode:
        db_file = "test.db" if test_mode else settings.SQLITE_PATH
        return f"sqlite+aiosqlite:///{BASE_DIR}/{db_file}"

    return f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


DATABASE_URL = get_db_url()

engine = create_async_engine(
    DATABASE_URL,
    echo=settings.DB_ECHO,
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = SQLModel


async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def data_access(action: str):
    """Translate store failures raised inside the block into DataAccessError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(f"Database error while trying to {action}")
        raise DataAccessError(f"Could not {action}, please retry") from e


@asynccontextmanager
async def transaction(db: AsyncSession, action: str):
    """
    Run the block as one unit of work on ``db``.

    Commits when the block finishes; any exception rolls back every change
    made inside it. Store failures surface as DataAccessError.
    """
    try:
        async with data_access(action):
            yield
            await db.commit()
    except Exception:
        await db.rollback()
        raise
