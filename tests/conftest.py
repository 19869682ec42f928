"""Shared test fixtures for quota-gate."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from quota_gate.access.gate import AccessGate
from quota_gate.common.config import QuotaGateSettings
from quota_gate.common.database import DatabaseManager
from quota_gate.content.models import ArticleModel, VideoModel
from quota_gate.content.repository import ContentRepository
from quota_gate.content.service import ContentService
from quota_gate.usage.store import UsageStore
from quota_gate.users.service import UserService


SECRET_KEY = "test-secret-key-for-unit-tests"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_settings(**overrides) -> QuotaGateSettings:
    defaults = {"secret_key": SECRET_KEY, "db_url": "sqlite+aiosqlite://"}
    defaults.update(overrides)
    return QuotaGateSettings(**defaults)


async def _add_user(db, email, membership_type="A"):
    async with db.get_session() as session:
        return await UserService().create_user(
            session, email, name=email.split("@")[0], membership_type=membership_type
        )


async def _add_articles(db, *ids):
    async with db.get_session() as session:
        for i, article_id in enumerate(ids):
            session.add(ArticleModel(
                id=article_id,
                title=f"Article {article_id}",
                slug=f"slug-{article_id}",
                preview=f"Preview of {article_id}",
                content=f"Protected body of {article_id}",
                author="Sarah Chen",
                published_at=BASE_TIME + timedelta(days=i),
            ))


async def _add_videos(db, *ids):
    async with db.get_session() as session:
        for i, video_id in enumerate(ids):
            session.add(VideoModel(
                id=video_id,
                title=f"Video {video_id}",
                slug=f"slug-{video_id}",
                description=f"About {video_id}",
                thumbnail=f"https://img.example.com/{video_id}.jpg",
                video_url=f"https://videos.example.com/{video_id}.mp4",
                duration=600,
                author="Emily Johnson",
                published_at=BASE_TIME + timedelta(days=i),
            ))


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
async def db(settings):
    manager = DatabaseManager(settings)
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
async def file_db(tmp_path):
    """File-backed database so concurrent sessions get separate connections."""
    manager = DatabaseManager(make_settings(db_url=f"sqlite+aiosqlite:///{tmp_path / 'qg.db'}"))
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def store():
    return UsageStore()


@pytest.fixture
def gate(settings, store):
    return AccessGate(settings, store)


@pytest.fixture
def repository():
    return ContentRepository()


@pytest.fixture
def content_svc(settings, gate, repository, store):
    return ContentService(settings, gate, repository, store)


@pytest.fixture
def app():
    """Create a test app with in-memory DB."""
    os.environ["QUOTA_GATE_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["QUOTA_GATE_SECRET_KEY"] = SECRET_KEY

    # Clear caches and singletons so new env vars take effect
    from quota_gate.common.config import get_settings
    get_settings.cache_clear()

    from quota_gate.deps import reset_singletons
    reset_singletons()

    from quota_gate.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from quota_gate.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


@pytest.fixture
def app_db(client):
    from quota_gate.deps import get_db
    return get_db()


@pytest.fixture
def login(app_db):
    """Create a user in the app database and return Bearer auth headers."""
    from quota_gate.common.security import create_session_token

    async def _login(email="reader@example.com", membership_type="A"):
        user = await _add_user(app_db, email, membership_type)
        return {"Authorization": f"Bearer {create_session_token(user.id)}"}

    return _login


@pytest.fixture
def add_user():
    return _add_user


@pytest.fixture
def add_articles():
    return _add_articles


@pytest.fixture
def add_videos():
    return _add_videos
