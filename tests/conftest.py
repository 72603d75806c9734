import os

# Settings are read at import time, so configure before importing blogverse
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from blogverse.database import get_db
from blogverse.dependencies import get_upload_broker
from blogverse.main import app
from blogverse.models import Base, Blog, BlogTag, User
from blogverse.repositories import AccountsRepository, BlogsRepository
from blogverse.services.auth import TokenAuthority
from blogverse.services.authoring import AuthoringService
from blogverse.services.feed import FeedQueryEngine
from blogverse.services.identity import IdentityManager
from blogverse.services.uploads import UploadBroker


BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    # One shared in-memory database per test
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def tokens():
    return TokenAuthority("test-secret")


@pytest.fixture
def accounts(session):
    return AccountsRepository(session)


@pytest.fixture
def blogs(session):
    return BlogsRepository(session)


@pytest.fixture
def identity(accounts, tokens):
    return IdentityManager(accounts, tokens, bcrypt_rounds=4)


@pytest.fixture
def authoring(accounts, blogs):
    return AuthoringService(accounts, blogs)


@pytest.fixture
def feed(blogs):
    return FeedQueryEngine(blogs, page_size=2)


@pytest.fixture
def make_user(session):
    async def _make_user(username="writer", email=None, fullname="Ada Writer", password_hash="x"):
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            fullname=fullname,
            password_hash=password_hash,
            profile_image=f"https://img.example.com/{username}.svg",
            total_posts=0,
        )
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_blog(session):
    counter = {"n": 0}

    async def _make_blog(author, title="A post", tags=(), draft=False, reads=0, likes=0, minutes=None):
        counter["n"] += 1
        n = counter["n"]
        blog = Blog(
            blog_id=f"post-{n}",
            title=title,
            description=f"About {title}",
            banner=f"https://img.example.com/banner-{n}.jpeg",
            content={"blocks": [{"type": "paragraph", "data": {"text": "hello"}}]},
            draft=draft,
            author=author,
            total_reads=reads,
            total_likes=likes,
            published_at=BASE_TIME + timedelta(minutes=n if minutes is None else minutes),
            tag_links=[BlogTag(position=i, tag=t) for i, t in enumerate(tags)],
        )
        session.add(blog)
        await session.commit()
        return blog

    return _make_blog


@pytest.fixture
def s3_client():
    client = MagicMock(name="S3Client")
    client.generate_presigned_url.return_value = "https://blogverse-website.s3.amazonaws.com/abc.jpeg?X-Amz-Signature=sig"
    return client


@pytest_asyncio.fixture
async def client(session_factory, s3_client):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_broker] = lambda: UploadBroker(s3_client, "blogverse-website")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
