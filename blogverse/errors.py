"""
Error taxonomy shared by all services.

Every error carries the HTTP status it maps to; `blogverse.main` installs a
single exception handler that renders them as `{"error": message}`.
"""

from __future__ import annotations

from typing import Any


class BlogverseError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(BlogverseError):
    status_code = 403

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class DuplicateEmailError(BlogverseError):
    status_code = 500

    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


class NotFoundError(BlogverseError):
    status_code = 403

    def __init__(self, resource: str, message: str | None = None):
        super().__init__(message or f"{resource.capitalize()} not found")
        self.resource = resource


class InvalidCredentialsError(BlogverseError):
    status_code = 403

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)


class MissingTokenError(BlogverseError):
    status_code = 401

    def __init__(self, message: str = "No access token"):
        super().__init__(message)


class InvalidTokenError(BlogverseError):
    status_code = 403

    def __init__(self, message: str = "Access token is invalid"):
        super().__init__(message)


class StorageError(BlogverseError):
    status_code = 500

    def __init__(self, operation: str, cause: Exception | str):
        super().__init__(f"Storage failure during {operation}")
        self.operation = operation
        self.cause = cause


class StorageProviderError(BlogverseError):
    status_code = 500

    def __init__(self, cause: Exception | str):
        super().__init__(f"Object storage request failed: {cause}")
        self.cause = cause


class PartialWriteError(BlogverseError):
    """
    The first write of a multi-step workflow landed, a later one did not.

    Nothing is rolled back: `public_id` identifies what was created.
    """
    status_code = 500

    def __init__(self, succeeded_step: str, failed_step: str, public_id: str | None = None):
        super().__init__(f"{succeeded_step} succeeded but {failed_step} failed")
        self.succeeded_step = succeeded_step
        self.failed_step = failed_step
        self.public_id = public_id

    def to_body(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "id": self.public_id,
            "succeeded_step": self.succeeded_step,
            "failed_step": self.failed_step,
        }
