"""
Database Connection and Session Management

This module sets up SQLAlchemy's async database engine and provides
a dependency injection function for FastAPI routes to access database sessions.

Every request gets its own session; the engine and its connection pool are
the only database objects shared between concurrent requests.
"""

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from blogverse.config import settings


# Create async database engine
# - echo: log every SQL statement in development only
# - Connection pool is automatically managed by SQLAlchemy
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.ENVIRONMENT == "development",
)


# Session factory for creating database sessions
# - expire_on_commit=False: objects stay readable after commit, which the
#   authoring workflow relies on between its two writes
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Yields a session and closes it when the request is complete,
    even if an exception occurs during request handling.
    """
    async with AsyncSessionLocal() as session:
        yield session
