import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.db.session import Base, get_db
from app.main import app as fastapi_app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def client(engine):
    test_session = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with test_session() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_group(client):
    """Create a group with the given member names, returns (group_id, {name: member_id})."""

    async def _make(*names, name="Trip", type="travel"):
        res = await client.post("/api/v1/groups", json={"name": name, "type": type})
        assert res.status_code == 201
        group_id = res.json()["id"]

        member_ids = {}
        for member_name in names:
            res = await client.post(f"/api/v1/groups/{group_id}/members", json={"name": member_name})
            assert res.status_code == 201
            member_ids[member_name] = res.json()["id"]

        return group_id, member_ids

    return _make
