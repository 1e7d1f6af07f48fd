from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.dependencies import limiter
from api.routes import spots, checkout, newsletter
from core.config import settings
from services.redis import close_redis

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Set specific log levels
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)  # Reduce noise from access logs
logging.getLogger("httpx").setLevel(logging.WARNING)  # One line per Overpass call otherwise

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY not set - checkout endpoints will return 500")
    if not settings.GMAIL_USER or not settings.GMAIL_APP_PASSWORD:
        logger.warning("GMAIL_USER/GMAIL_APP_PASSWORD not set - certificate emails are disabled")
    yield
    await close_redis()


app = FastAPI(
    title=f"{settings.BRAND} API",
    description="Random geographic tiles, checkout and novelty certificates",
    version="3.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

allowed_origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allowed_origins != ["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(spots.router)
app.include_router(checkout.router)
app.include_router(newsletter.router)


@app.get("/")
async def root():
    return {"message": f"{settings.BRAND} API", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
