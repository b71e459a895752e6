"""Service status endpoint (no authentication)."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from redis.exceptions import RedisError

from app.cache import RedisCache, get_cache
from app.config import get_settings
from app.schemas.common import api_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Status"])


@router.get("/status", summary="Status layanan")
def get_status(cache: Annotated[RedisCache, Depends(get_cache)]):
    settings = get_settings()
    try:
        redis_ok = cache.ping()
    except RedisError:
        logger.warning("Redis ping failed")
        redis_ok = False
    return api_response(
        {"app": settings.APP_NAME, "env": settings.APP_ENV, "redis": redis_ok},
        message="API is running",
    )
