"""
Authentication Routes

Email and password accounts:
1. POST /signup creates an account and returns a session
2. POST /signin checks credentials and returns a session

A session is the access token plus the public profile fields the client
shows in its navigation bar. The token goes in an
"Authorization: Bearer <token>" header on authoring requests.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from blogverse.dependencies import get_identity_manager
from blogverse.limiter import limiter
from blogverse.services.identity import IdentityManager, SessionDescriptor


router = APIRouter(tags=["auth"])


class SignupRequest(BaseModel):
    # Defaults let the service report a missing field as a 403 validation
    # error, the same as an invalid one
    fullname: str = ""
    email: str = ""
    password: str = ""


class SigninRequest(BaseModel):
    email: str = ""
    password: str = ""


@router.post("/signup", response_model=SessionDescriptor)
@limiter.limit("10/minute")
async def signup(
    request: Request,
    payload: SignupRequest,
    identity: IdentityManager = Depends(get_identity_manager),
):
    """
    Create an account.

    Returns:
        Session descriptor for the new account

    Errors:
        403: validation failure
        500: email already registered, or storage failure
    """
    return await identity.signup(payload.fullname, payload.email, payload.password)


@router.post("/signin", response_model=SessionDescriptor)
@limiter.limit("20/minute")
async def signin(
    request: Request,
    payload: SigninRequest,
    identity: IdentityManager = Depends(get_identity_manager),
):
    """
    Sign in with email and password.

    Errors:
        403: unknown email or incorrect password
    """
    return await identity.signin(payload.email, payload.password)
