# repair_cafe/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from repair_cafe.api.v1.api import api_router
from repair_cafe.core.config import settings
from repair_cafe.core.email import init_resend
from repair_cafe.core.error_handlers import register_exception_handlers
from repair_cafe.core.limiter import limiter
from repair_cafe.scheduler import init_scheduler, shutdown_scheduler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_resend()
    if settings.ENABLE_SCHEDULER:
        init_scheduler()
    yield
    if settings.ENABLE_SCHEDULER:
        shutdown_scheduler()
    logger.info("Application shutting down...")


app = FastAPI(
    title="Repair Cafe Service",
    version="1.0.0",
    description="""
        Runs community repair events.

        ## Features

        * **Events**: Publish repair events at venues with a capacity
        * **Registration**: Attendees register broken items, with a waitlist when full
        * **Fixer Queue**: Volunteers claim items and log repair outcomes
        * **Check-in**: QR lookup and name search at the door
        * **Reports**: Per-event impact numbers

        ## Authentication

        Sign-in is by emailed magic link, which sets a session cookie.
        Attendees can also manage a registration with its `?token=` link.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,  # session cookie
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Repair Cafe Service is running"}
