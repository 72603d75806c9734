"""
Database Models for the Blogverse Application

This module defines the SQLAlchemy ORM models for the application:
- User: Accounts that can sign in and author posts
- Blog: Published or draft posts with their activity counters
- BlogTag: Normalized tags attached to a post

The models demonstrate several ORM patterns:
- Many-to-many association table (an author's owned posts)
- One-to-many with ordered children (a post's tags)
- JSON columns for structured post bodies
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship


# Base class for all ORM models
Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Association table holding each author's set of owned posts
# This is written as a separate bookkeeping step after the post itself
# is stored, so it is not derived from Blog.author_id
user_blogs = Table(
    "user_blogs",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("blog_id", Integer, ForeignKey("blogs.id"), primary_key=True),
)


class User(Base):
    """
    User model representing an account.

    Email and username are both unique. The password column only ever
    holds a bcrypt hash.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_posts >= 0", name="ck_users_total_posts_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # unique=True makes the database the final arbiter of duplicates
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)
    fullname = Column(String, nullable=False)
    profile_image = Column(String, nullable=False, default="")

    # Number of published (non-draft) posts
    total_posts = Column(Integer, nullable=False, default=0)

    joined_at = Column(DateTime(timezone=True), default=_utcnow)

    # Posts owned by this account (drafts included)
    blogs = relationship("Blog", secondary=user_blogs, viewonly=True)


class Blog(Base):
    """
    Blog model representing a post.

    `blog_id` is the public slug; `id` never leaves the service.
    """
    __tablename__ = "blogs"
    __table_args__ = (
        CheckConstraint("total_reads >= 0", name="ck_blogs_total_reads_non_negative"),
        CheckConstraint("total_likes >= 0", name="ck_blogs_total_likes_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    blog_id = Column(String, unique=True, index=True, nullable=False)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    banner = Column(String, nullable=False)

    # Editor output: {"blocks": [...], ...}
    content = Column(JSON, nullable=False)

    draft = Column(Boolean, nullable=False, default=False, index=True)

    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total_reads = Column(Integer, nullable=False, default=0)
    total_likes = Column(Integer, nullable=False, default=0)

    published_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    author = relationship("User")

    # Tags in the order the author gave them
    tag_links = relationship(
        "BlogTag",
        order_by="BlogTag.position",
        cascade="all, delete-orphan",
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]


class BlogTag(Base):
    """
    A single lowercase tag on a post.

    Kept in its own table so tag membership is a plain indexed lookup
    on every database backend.
    """
    __tablename__ = "blog_tags"

    blog_pk = Column(Integer, ForeignKey("blogs.id"), primary_key=True)
    position = Column(Integer, primary_key=True)
    tag = Column(String, nullable=False, index=True)
