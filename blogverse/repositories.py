"""
Repositories over the async database session.

Services never touch SQLAlchemy directly; they receive one of these,
built per request around that request's session (see dependencies.py).

Any SQLAlchemyError is rolled back and re-raised as StorageError, except
IntegrityError on account creation, which the identity service needs to
see in order to tell duplicate emails from username collisions.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blogverse.errors import StorageError
from blogverse.models import Blog, User, user_blogs


logger = logging.getLogger(__name__)


class AccountsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, operation: str, exc: Exception) -> StorageError:
        logger.error(f"Accounts storage failure during {operation}: {exc}")
        await self.session.rollback()
        return StorageError(operation, exc)

    async def get_by_id(self, user_id: int) -> User | None:
        try:
            result = await self.session.execute(select(User).filter(User.id == user_id))
        except SQLAlchemyError as exc:
            raise await self._fail("get_user", exc) from exc
        return result.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        try:
            result = await self.session.execute(select(User).filter(User.email == email))
        except SQLAlchemyError as exc:
            raise await self._fail("get_user", exc) from exc
        return result.scalars().first()

    async def email_exists(self, email: str) -> bool:
        return await self._exists(User.email == email)

    async def username_exists(self, username: str) -> bool:
        return await self._exists(User.username == username)

    async def _exists(self, condition) -> bool:
        try:
            result = await self.session.execute(select(User.id).filter(condition).limit(1))
        except SQLAlchemyError as exc:
            raise await self._fail("lookup_user", exc) from exc
        return result.first() is not None

    async def create(self, user: User) -> User:
        """
        Insert a new account.

        Raises:
            IntegrityError: a unique constraint (email or username) was hit;
                            the session has been rolled back
            StorageError: any other database failure
        """
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            raise await self._fail("create_user", exc) from exc
        return user

    async def append_blog(self, user_id: int, blog_pk: int, published: bool) -> None:
        """
        Record a new post against its author.

        Links the post to the author's owned set and bumps total_posts by one
        for published posts only. Both changes commit together.
        """
        increment = 1 if published else 0
        try:
            result = await self.session.execute(
                update(User)
                .where(User.id == user_id)
                .values(total_posts=User.total_posts + increment)
            )
            if result.rowcount != 1:
                await self.session.rollback()
                raise StorageError("update_author", f"author {user_id} not found")
            await self.session.execute(insert(user_blogs).values(user_id=user_id, blog_id=blog_pk))
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail("update_author", exc) from exc


class BlogsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, blog: Blog) -> Blog:
        self.session.add(blog)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to store blog {blog.blog_id}: {exc}")
            await self.session.rollback()
            raise StorageError("create_blog", exc) from exc
        return blog

    async def find_public(self, where, order_by, limit: int, offset: int = 0) -> list[Blog]:
        """
        Fetch non-draft posts with their author and tags loaded.

        Args:
            where: Extra filter conditions (drafts are always excluded)
            order_by: Sort expressions; internal id is appended as a tie-breaker
            limit: Maximum number of rows
            offset: Rows to skip
        """
        # selectinload() fetches authors and tags up front; lazy loading
        # is not available under an async session
        query = (
            select(Blog)
            .options(selectinload(Blog.author), selectinload(Blog.tag_links))
            .filter(Blog.draft.is_(False), *where)
            .order_by(*order_by, Blog.id.desc())
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Blog query failed: {exc}")
            await self.session.rollback()
            raise StorageError("find_blogs", exc) from exc
        return list(result.scalars().all())

    async def count_public(self, where) -> int:
        query = select(func.count(Blog.id)).filter(Blog.draft.is_(False), *where)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Blog count failed: {exc}")
            await self.session.rollback()
            raise StorageError("count_blogs", exc) from exc
        return int(result.scalar_one())
