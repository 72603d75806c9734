"""
Feed Query Engine - Latest, Trending and Search

Read-only discovery queries over published posts. Drafts never appear,
and every result goes through the same public projection: author profile
fields plus post header fields, without the post body or internal ids.

Search and count share one filter builder, so a count always describes
exactly the result set its own parameters would search.
"""

from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import desc

from blogverse.errors import ValidationError
from blogverse.models import Blog, BlogTag
from blogverse.repositories import BlogsRepository


# Default number of posts on the home page lists
FEED_LIMIT = 5

# Posts per search results page
SEARCH_PAGE_SIZE = 2


class AuthorSummary(BaseModel):
    profile_image: str
    username: str
    fullname: str


class ActivitySummary(BaseModel):
    total_reads: int
    total_likes: int


class BlogSummary(BaseModel):
    public_id: str
    title: str
    description: str
    banner: str
    activity: ActivitySummary
    tags: list[str]
    published_at: datetime
    author: AuthorSummary


def to_summary(blog: Blog) -> BlogSummary:
    """Project a post (with author and tags loaded) onto its public fields."""
    return BlogSummary(
        public_id=blog.blog_id,
        title=blog.title,
        description=blog.description,
        banner=blog.banner,
        activity=ActivitySummary(total_reads=blog.total_reads, total_likes=blog.total_likes),
        tags=blog.tags,
        published_at=blog.published_at,
        author=AuthorSummary(
            profile_image=blog.author.profile_image,
            username=blog.author.username,
            fullname=blog.author.fullname,
        ),
    )


def search_filter(tag: str | None = None, text_query: str | None = None) -> list:
    """
    Build the search conditions for a tag or a title query.

    A tag wins over a text query. Tags are compared in lowercase, the form
    they are stored in. A title query is a case-insensitive substring match
    with LIKE wildcards escaped.
    """
    tag = (tag or "").strip().lower()
    if tag:
        return [Blog.tag_links.any(BlogTag.tag == tag)]
    if text_query:
        return [Blog.title.icontains(text_query, autoescape=True)]
    return []


class FeedQueryEngine:
    def __init__(self, blogs: BlogsRepository, page_size: int = SEARCH_PAGE_SIZE):
        self.blogs = blogs
        self.page_size = page_size

    async def latest(self, limit: int = FEED_LIMIT) -> list[BlogSummary]:
        rows = await self.blogs.find_public([], [desc(Blog.published_at)], limit=limit)
        return [to_summary(blog) for blog in rows]

    async def trending(self, limit: int = FEED_LIMIT) -> list[BlogSummary]:
        """Most read first; likes, then recency, break ties."""
        order = [desc(Blog.total_reads), desc(Blog.total_likes), desc(Blog.published_at)]
        rows = await self.blogs.find_public([], order, limit=limit)
        return [to_summary(blog) for blog in rows]

    async def search(self, tag: str | None = None, text_query: str | None = None, page: int = 1) -> list[BlogSummary]:
        """
        One page of posts matching a tag or a title query, newest first.

        Raises:
            ValidationError: page is not a positive integer
        """
        if page < 1:
            raise ValidationError("page", "Page must be 1 or greater")
        rows = await self.blogs.find_public(
            search_filter(tag, text_query),
            [desc(Blog.published_at)],
            limit=self.page_size,
            offset=(page - 1) * self.page_size,
        )
        return [to_summary(blog) for blog in rows]

    async def count(self, tag: str | None = None, text_query: str | None = None) -> int:
        return await self.blogs.count_public(search_filter(tag, text_query))
