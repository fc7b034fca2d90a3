import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.calendar_feed.router import router as calendar_router
from src.config.backend import get_backend_mode
from src.config.logging import setup_logging
from src.config.settings import settings
from src.guests.routers import router as guests_router
from src.pages.access import SiteAccessMiddleware
from src.pages.router import router as pages_router
from src.routers.healthz.router import router as healthz_router
from src.rsvp.router import router as rsvp_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Pick hardcoded vs Notion once, before the first request
    get_backend_mode()
    if not settings.calendar_hmac_secret:
        logger.warning("CALENDAR_HMAC_SECRET is not set, calendar links are disabled")
    yield


setup_logging()

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Sargaux Wedding API",
    description="Guest login, RSVPs and personal calendar feeds for the Sargaux wedding",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(SiteAccessMiddleware)  # type: ignore[arg-type]

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(guests_router, tags=["Guests"])
app.include_router(rsvp_router, tags=["RSVP"])
app.include_router(calendar_router, tags=["Calendar"])
app.include_router(pages_router, tags=["Pages"])
