"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Database table creation on startup
- CORS for the browser editor
- Rate limiting
- Translation of service errors into {"error": message} responses
- Route registration

Run with:
    uvicorn blogverse.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from blogverse.config import settings
from blogverse.database import engine
from blogverse.errors import BlogverseError
from blogverse.limiter import limiter
from blogverse.models import Base
from blogverse.routes import auth, blogs, uploads


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup creates any missing tables; shutdown disposes of the
    connection pool.
    """
    async with engine.begin() as conn:
        # create_all() is synchronous, run_sync() bridges it
        await conn.run_sync(Base.metadata.create_all)

    yield

    await engine.dispose()


app = FastAPI(title="Blogverse", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BlogverseError)
async def blogverse_error_handler(request: Request, exc: BlogverseError):
    """
    Render any service error as a status code plus {"error": message}.

    Server-side failures are logged here once; client errors are not.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Render a malformed request body like any other validation failure:
    403 with the first problem as {"error": message}.
    """
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=403, content={"error": "Invalid request"})
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first['msg']}" if field else first["msg"]
    return JSONResponse(status_code=403, content={"error": message})


app.include_router(auth.router)
app.include_router(uploads.router)
app.include_router(blogs.router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
