"""
Identity & Credential Manager

Sign-up and sign-in. Accounts are validated in a fixed order, passwords are
hashed with bcrypt before they reach the database, and both flows finish by
minting an access token through the TokenAuthority.

bcrypt is CPU-bound, so hashing and comparison run in a worker thread to
keep the event loop free for other requests.
"""

import asyncio
import logging

import bcrypt
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from blogverse.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from blogverse.models import User
from blogverse.repositories import AccountsRepository
from blogverse.services.auth import TokenAuthority
from blogverse.utils.text import random_suffix
from blogverse.utils.validators import MAX_PASSWORD_BYTES, is_valid_email, is_valid_password


logger = logging.getLogger(__name__)

# Characters appended to a username that is already taken
USERNAME_SUFFIX_LENGTH = 5

# Inserts attempted before giving up on finding a free username
USERNAME_ATTEMPTS = 3

# Default avatar service, seeded per account
AVATAR_URL = "https://api.dicebear.com/6.x/notionists-neutral/svg?seed={seed}"


class SessionDescriptor(BaseModel):
    """Payload returned by a successful sign-up or sign-in."""
    access_token: str
    profile_image: str
    username: str
    fullname: str


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def validate_signup(fullname: str, email: str, password: str) -> None:
    """
    Check sign-up input, stopping at the first problem.

    Raises:
        ValidationError: naming the first invalid field
    """
    if len(fullname) < 3:
        raise ValidationError("fullname", "Full name must be at least 3 letters long")
    if not email:
        raise ValidationError("email", "Enter Email")
    if not is_valid_email(email):
        raise ValidationError("email", "Invalid Email")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError("password", "Password is too long")
    if not is_valid_password(password):
        raise ValidationError(
            "password",
            "Password should be 6 to 20 characters long with a numeric, 1 lowercase and 1 uppercase letter",
        )


async def hash_password(password: str, rounds: int) -> str:
    def _hash():
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

    return await asyncio.to_thread(_hash)


async def check_password(password: str, password_hash: str) -> bool:
    """
    Compare a password against a stored bcrypt hash.

    Raises:
        ValueError: the stored hash is malformed
    """
    def _check():
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    return await asyncio.to_thread(_check)


class IdentityManager:
    def __init__(self, accounts: AccountsRepository, tokens: TokenAuthority, bcrypt_rounds: int = 10):
        self.accounts = accounts
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    def _session_for(self, user: User) -> SessionDescriptor:
        return SessionDescriptor(
            access_token=self.tokens.issue(user.id),
            profile_image=user.profile_image,
            username=user.username,
            fullname=user.fullname,
        )

    async def generate_username(self, email: str) -> str:
        """
        Derive a username from the email's local part.

        A taken name gets a short random suffix. The check and the later
        insert are not atomic; signup() retries on a conflicting insert.

        Expects the normalized (lowercased) email, so "Jane@x.com" yields
        "jane", not "Jane".
        """
        username = email.split("@")[0]
        if await self.accounts.username_exists(username):
            username += random_suffix(USERNAME_SUFFIX_LENGTH)
        return username

    async def signup(self, fullname: str, email: str, password: str) -> SessionDescriptor:
        """
        Create an account and sign it in.

        Raises:
            ValidationError: input failed validation
            DuplicateEmailError: an account with this email exists
            StorageError: the account could not be stored
        """
        email = normalize_email(email)
        validate_signup(fullname, email, password)

        password_hash = await hash_password(password, self.bcrypt_rounds)
        local_part = email.split("@")[0]
        username = await self.generate_username(email)

        for attempt in range(USERNAME_ATTEMPTS):
            user = User(
                fullname=fullname,
                email=email,
                password_hash=password_hash,
                username=username,
                profile_image=AVATAR_URL.format(seed=username),
                total_posts=0,
            )
            try:
                await self.accounts.create(user)
                break
            except IntegrityError as exc:
                if await self.accounts.email_exists(email):
                    raise DuplicateEmailError() from exc
                # Someone else took the username between check and insert
                logger.info(f"Username {username} taken, retrying signup with a new suffix")
                username = local_part + random_suffix(USERNAME_SUFFIX_LENGTH)
        else:
            raise StorageError("create_user", "could not allocate a unique username")

        logger.info(f"New account {user.id} created with username {user.username}")
        return self._session_for(user)

    async def signin(self, email: str, password: str) -> SessionDescriptor:
        """
        Authenticate an account by email and password.

        Raises:
            NotFoundError: no account has this email
            InvalidCredentialsError: wrong password or unreadable stored hash
        """
        user = await self.accounts.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("email", "Email not found")

        try:
            matches = await check_password(password or "", user.password_hash)
        except ValueError as exc:
            logger.error(f"Password check failed for account {user.id}: {exc}")
            raise InvalidCredentialsError() from exc

        if not matches:
            raise InvalidCredentialsError()

        logger.info(f"Account {user.id} signed in")
        return self._session_for(user)
