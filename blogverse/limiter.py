"""
Rate Limiting Configuration

This module sets up the slowapi Limiter. Counters live wherever
RATE_LIMIT_STORAGE_URI points (in-process memory by default, Redis in a
multi-worker deployment). Import `limiter` to decorate routes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from blogverse.config import settings

# key_func=get_remote_address: Uses the client's IP address as the unique identifier
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
