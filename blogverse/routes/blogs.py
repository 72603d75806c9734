"""
Blog Routes - Authoring and Discovery

This module handles all post-related endpoints:
- POST /create-blog: Create a post (requires an access token)
- GET /latest-blogs: Newest published posts
- GET /trending-blogs: Most read published posts
- POST /search-blog-posts: One page of posts by tag or title
- GET /search-blog-counts: Total posts matching the same search

Discovery endpoints are public and never return drafts.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from blogverse.dependencies import get_authoring_service, get_current_author_id, get_feed
from blogverse.limiter import limiter
from blogverse.services.authoring import AuthoringService
from blogverse.services.feed import BlogSummary, FeedQueryEngine


router = APIRouter(tags=["blogs"])


class BlogContent(BaseModel):
    # Editor.js output; blocks are stored untouched
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    time: int | None = None
    version: str | None = None


class CreateBlogRequest(BaseModel):
    title: str = ""
    desc: str = ""
    banner: str = ""
    tags: list[str] = Field(default_factory=list)
    content: BlogContent = Field(default_factory=BlogContent)
    draft: bool = False


class CreateBlogResponse(BaseModel):
    id: str


class BlogsResponse(BaseModel):
    blogs: list[BlogSummary]


class SearchRequest(BaseModel):
    tag: str | None = None
    query: str | None = None
    page: int = 1


class CountResponse(BaseModel):
    total_docs: int


@router.post("/create-blog", response_model=CreateBlogResponse)
@limiter.limit("10/minute")
async def create_blog(
    request: Request,
    payload: CreateBlogRequest,
    author_id: int = Depends(get_current_author_id),
    authoring: AuthoringService = Depends(get_authoring_service),
):
    """
    Create a post for the signed-in author.

    Returns:
        {"id": <public slug>}

    Errors:
        401: no access token
        403: invalid token, unknown author, or validation failure
        500: storage failure, or the post was stored but the author was not
             updated (body then also carries the new id)
    """
    blog_id = await authoring.create(
        author_id,
        title=payload.title,
        description=payload.desc,
        banner=payload.banner,
        tags=payload.tags,
        body=payload.content.model_dump(exclude_none=True),
        is_draft=payload.draft,
    )
    return CreateBlogResponse(id=blog_id)


@router.get("/latest-blogs", response_model=BlogsResponse)
async def latest_blogs(feed: FeedQueryEngine = Depends(get_feed)):
    return BlogsResponse(blogs=await feed.latest())


@router.get("/trending-blogs", response_model=BlogsResponse)
async def trending_blogs(feed: FeedQueryEngine = Depends(get_feed)):
    return BlogsResponse(blogs=await feed.trending())


@router.post("/search-blog-posts", response_model=BlogsResponse)
async def search_blog_posts(payload: SearchRequest, feed: FeedQueryEngine = Depends(get_feed)):
    """
    Search published posts.

    A tag takes precedence over a title query. Pages are 1-indexed.
    """
    blogs = await feed.search(tag=payload.tag, text_query=payload.query, page=payload.page)
    return BlogsResponse(blogs=blogs)


@router.get("/search-blog-counts", response_model=CountResponse)
async def search_blog_counts(
    tag: str | None = None,
    query: str | None = None,
    feed: FeedQueryEngine = Depends(get_feed),
):
    """Count every published post matching a search, across all pages."""
    return CountResponse(total_docs=await feed.count(tag=tag, text_query=query))
