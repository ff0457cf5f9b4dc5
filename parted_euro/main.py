"""
Parted Euro Shipping
FastAPI application entry point

- Shipping quotes and destination countries under /api/shipping
- Rate limiting with SlowAPI
- Error sanitization middleware
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from parted_euro.api.routes import shipping
from parted_euro.core.config import settings
from parted_euro.core.error_handler import ErrorSanitizationMiddleware
from parted_euro.core.rate_limit import limiter, rate_limit_exceeded_handler
from parted_euro.modules.shipping.carriers import CarrierFactory

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    carriers = [c.value for c in CarrierFactory.get_registered_carriers()]
    logger.info(f"{settings.APP_NAME} starting ({settings.ENVIRONMENT}), carriers: {carriers}")
    if not settings.AUSPOST_API_KEY:
        logger.warning("AUSPOST_API_KEY is not set - AusPost quotes will fail")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="Parted Euro Shipping API",
    description="""
## Parted Euro Shipping Quotes

Shipping options for used European car parts sent from Knoxfield VIC.

### Carriers
- **AusPost**: domestic Regular/Express and international Standard/Express parcels
- **Interparcel**: freight for heavy or oversized items

### Rate Limits
- Shipping quotes: 30 requests/minute
- General: 100 requests/minute
    """,
    version="1.0.0",
    debug=settings.DEBUG,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Catches unhandled exceptions
app.add_middleware(ErrorSanitizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shipping.router, prefix="/api", tags=["Shipping"])


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Parted Euro Shipping API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "carriers": [c.value for c in CarrierFactory.get_registered_carriers()],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
