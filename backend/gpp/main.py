import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gpp.config import settings
from gpp.database import engine
from gpp.middleware.exceptions import register_exception_handlers
from gpp.routers import auth, health, onboarding, profile
from gpp.utils.redis_client import close_redis

logger = logging.getLogger("gpp")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting GPP API (%s)", settings.environment)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("GPP API stopped")


app = FastAPI(
    title="Genesis Parallel Protocol",
    description="Member accounts and onboarding for the Genesis Parallel Protocol network",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
app.include_router(onboarding.router, prefix="/api/onboarding", tags=["onboarding"])
