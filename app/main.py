import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Redis holds sessions and lockouts, warn early if unreachable
    from app.cache import get_cache

    try:
        get_cache().ping()
        logger.info("Redis reachable at startup")
    except RedisError as exc:
        logger.warning("Redis not reachable at startup: %s", exc)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from app.middleware.error_handlers import register_error_handlers  # noqa: E402

register_error_handlers(app)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from app.routers import auth  # noqa: E402

app.include_router(auth.router, prefix="/auth", tags=["Auth"])

# Status
from app.routers import status  # noqa: E402

app.include_router(status.router, prefix=settings.API_PREFIX, tags=["Status"])

# Users
from app.routers import users  # noqa: E402

app.include_router(users.router, prefix=settings.API_PREFIX, tags=["Users"])

# Master data
from app.routers import master_data  # noqa: E402

app.include_router(master_data.router, prefix=settings.API_PREFIX, tags=["Master Data"])
