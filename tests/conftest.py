import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from music_library.core.db import create_engine, create_session_factory, get_db
from music_library.main import app
from music_library.models import Base


@pytest.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def create_artist(client):
    async def _create(name: str = "The Beatles", bio: str = "British rock band") -> dict:
        response = await client.post("/api/artists", json={"name": name, "bio": bio})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_genre(client):
    async def _create(name: str = "Rock", description: str = "Rock music") -> dict:
        response = await client.post("/api/genres", json={"name": name, "description": description})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_album(client):
    async def _create(title: str, artist_id: int, **fields) -> dict:
        response = await client.post("/api/albums", json={"title": title, "artist_id": artist_id, **fields})
        assert response.status_code == 201, response.text
        return response.json()

    return _create
