"""
Dependencies for FastAPI Routes

This module wires services together per request:
- Process-wide collaborators (TokenAuthority, UploadBroker) are built once
  from settings and cached
- Repositories and services are built per request around that request's
  database session
- get_current_author_id guards authoring routes with the access token

Tests swap any of these out through app.dependency_overrides.
"""

from datetime import timedelta
from functools import lru_cache

import boto3
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from blogverse.config import settings
from blogverse.database import get_db
from blogverse.errors import InvalidTokenError, MissingTokenError
from blogverse.repositories import AccountsRepository, BlogsRepository
from blogverse.services.auth import TokenAuthority
from blogverse.services.authoring import AuthoringService
from blogverse.services.feed import FeedQueryEngine
from blogverse.services.identity import IdentityManager
from blogverse.services.uploads import UploadBroker


@lru_cache
def get_token_authority() -> TokenAuthority:
    expires = None
    if settings.ACCESS_TOKEN_EXPIRE_MINUTES:
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return TokenAuthority(settings.SECRET_KEY, expires_delta=expires)


@lru_cache
def get_upload_broker() -> UploadBroker:
    # boto3 clients are thread-safe and can be shared across requests
    client = boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )
    return UploadBroker(client, settings.AWS_BUCKET, expires_in=settings.UPLOAD_URL_EXPIRES)


def get_accounts(db: AsyncSession = Depends(get_db)) -> AccountsRepository:
    return AccountsRepository(db)


def get_blogs(db: AsyncSession = Depends(get_db)) -> BlogsRepository:
    return BlogsRepository(db)


def get_identity_manager(
    accounts: AccountsRepository = Depends(get_accounts),
    tokens: TokenAuthority = Depends(get_token_authority),
) -> IdentityManager:
    return IdentityManager(accounts, tokens, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_authoring_service(
    accounts: AccountsRepository = Depends(get_accounts),
    blogs: BlogsRepository = Depends(get_blogs),
) -> AuthoringService:
    return AuthoringService(accounts, blogs)


def get_feed(blogs: BlogsRepository = Depends(get_blogs)) -> FeedQueryEngine:
    return FeedQueryEngine(blogs)


def extract_token(authorization: str | None) -> str:
    """
    Pull the token out of an "Authorization: Bearer <token>" header.

    Raises:
        MissingTokenError: header absent or carries no token
        InvalidTokenError: scheme other than Bearer
    """
    scheme, _, token = (authorization or "").strip().partition(" ")
    token = token.strip()
    if not token:
        raise MissingTokenError()
    if scheme.lower() != "bearer":
        raise InvalidTokenError()
    return token


async def get_current_author_id(
    authorization: str | None = Header(default=None),
    tokens: TokenAuthority = Depends(get_token_authority),
) -> int:
    """
    Dependency that requires a valid access token.

    Usage in routes:
        @router.post("/protected")
        async def protected_route(author_id: int = Depends(get_current_author_id)):
            ...
    """
    return tokens.verify(extract_token(authorization))
