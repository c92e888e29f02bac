"""Rate limiting configuration."""

from __future__ import annotations

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)

# Login and callback are the only unauthenticated endpoints worth throttling.
# Point RATE_LIMIT_STORAGE_URI at redis:// when running several instances.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.ENVIRONMENT != "test",
)
logger.info(f"Rate limiter configured with storage: {settings.RATE_LIMIT_STORAGE_URI}")