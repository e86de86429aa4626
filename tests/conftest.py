import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.api.db import models  # noqa: F401
from app.api.db.database import get_db
from app.api.modules.v1.projects.models.project_model import Priority, Project, ProjectStatus
from app.api.modules.v1.users.models.users_model import UserRole
from app.api.modules.v1.users.service.user import UserCRUD
from app.api.modules.v1.work_items.models.work_item_model import WorkItem, WorkItemStatus
from app.api.utils.jwt import create_access_token
from app.api.utils.password import hash_password
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite://"
DEFAULT_PASSWORD = "Password123!"

# Hashed once; bcrypt is deliberately slow
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test. StaticPool keeps the single connection alive."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, each request on its own session of the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_factory(test_session):
    async def create(
        role: UserRole = UserRole.EMPLOYEE,
        email: str = None,
        full_name: str = "Test User",
        performance: float = 100.0,
        is_active: bool = True,
        skills: str = None,
    ):
        user = await UserCRUD.create_user(
            test_session,
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            hashed_password=DEFAULT_PASSWORD_HASH,
            full_name=full_name,
            role=role,
            skills=skills,
        )
        user.is_active = is_active
        user.profile.performance = performance
        test_session.add(user)
        test_session.add(user.profile)
        await test_session.commit()
        return user

    return create


@pytest_asyncio.fixture
async def manager(user_factory):
    return await user_factory(role=UserRole.MANAGER, full_name="Mary Manager")


@pytest_asyncio.fixture
async def employee(user_factory):
    return await user_factory(full_name="Eve Employee", skills="python, sql")


@pytest_asyncio.fixture
async def other_employee(user_factory):
    return await user_factory(full_name="Oscar Other")


@pytest.fixture
def project_factory(test_session):
    async def create(created_by, name="Project", status=ProjectStatus.ACTIVE, **kwargs):
        project = Project(
            name=name,
            status=status,
            priority=kwargs.pop("priority", Priority.MEDIUM),
            created_by_id=created_by.id,
            **kwargs,
        )
        test_session.add(project)
        await test_session.commit()
        await test_session.refresh(project)
        return project

    return create


@pytest_asyncio.fixture
async def project(project_factory, manager):
    return await project_factory(manager, name="Apollo")


@pytest.fixture
def work_item_factory(test_session):
    """Insert a work item directly, bypassing eligibility and scoring."""

    async def create(
        project,
        assignee,
        creator,
        status=WorkItemStatus.TODO,
        name="Task",
        deadline=None,
        **kwargs,
    ):
        work_item = WorkItem(
            name=name,
            project_id=project.id,
            assigned_to_id=assignee.id,
            created_by_id=creator.id,
            status=status,
            deadline=deadline or datetime.now(timezone.utc) + timedelta(days=7),
            **kwargs,
        )
        test_session.add(work_item)
        await test_session.commit()
        await test_session.refresh(work_item)
        return work_item

    return create


@pytest.fixture
def auth_headers():
    def headers_for(user):
        token = create_access_token(user_id=user.id, role=user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return headers_for
