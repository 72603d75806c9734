"""
Content Authoring Service

Creates posts. A post is stored first and the author's bookkeeping
(owned-post link and published-post counter) is written afterwards in a
separate commit. The two writes are not atomic: when the second one fails
the post stays, and the caller gets a PartialWriteError naming both steps
and the new post's public id.
"""

import logging
from typing import Any

from blogverse.errors import NotFoundError, PartialWriteError, StorageError, ValidationError
from blogverse.models import Blog, BlogTag
from blogverse.repositories import AccountsRepository, BlogsRepository
from blogverse.utils.text import normalize_tags, slugify_title


logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 200


def validate_blog(title: str, description: str, banner: str, body: dict[str, Any] | None) -> None:
    """
    Check a post, stopping at the first problem.

    Raises:
        ValidationError: naming the first invalid field
    """
    if not title:
        raise ValidationError("title", "You must provide a title to publish the blog")
    if not description or len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description",
            f"You must provide a description under {MAX_DESCRIPTION_LENGTH} characters",
        )
    if not banner:
        raise ValidationError("banner", "You must provide a banner to publish the blog")
    blocks = (body or {}).get("blocks")
    if not isinstance(blocks, list) or not blocks:
        raise ValidationError("content", "There must be some blog content to publish it")


class AuthoringService:
    def __init__(self, accounts: AccountsRepository, blogs: BlogsRepository):
        self.accounts = accounts
        self.blogs = blogs

    async def create(
        self,
        author_id: int,
        title: str,
        description: str,
        banner: str,
        tags: list[str],
        body: dict[str, Any],
        is_draft: bool,
    ) -> str:
        """
        Store a new post and update its author.

        Args:
            author_id: Verified account id of the author
            title, description, banner: Post header fields
            tags: Free-form tags, normalized to lowercase
            body: Editor output with a non-empty "blocks" list
            is_draft: Drafts are linked to the author but not counted

        Returns:
            The new post's public slug

        Raises:
            NotFoundError: the author does not exist
            ValidationError: a field is missing or invalid
            StorageError: the post could not be stored
            PartialWriteError: the post was stored but the author was not updated
        """
        if await self.accounts.get_by_id(author_id) is None:
            raise NotFoundError("author")

        validate_blog(title, description, banner, body)

        blog = Blog(
            blog_id=slugify_title(title),
            title=title,
            description=description,
            banner=banner,
            content=body,
            draft=bool(is_draft),
            author_id=author_id,
            total_reads=0,
            total_likes=0,
            tag_links=[BlogTag(position=i, tag=tag) for i, tag in enumerate(normalize_tags(tags))],
        )
        await self.blogs.create(blog)

        try:
            await self.accounts.append_blog(author_id, blog.id, published=not blog.draft)
        except StorageError as exc:
            logger.error(f"Blog {blog.blog_id} stored but author {author_id} was not updated: {exc.cause}")
            raise PartialWriteError("create_blog", "update_author", public_id=blog.blog_id) from exc

        logger.info(f"Author {author_id} created {'draft' if blog.draft else 'blog'} {blog.blog_id}")
        return blog.blog_id
