"""Price Reports - FastAPI Backend"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from pricereports.api import health, reports
from pricereports.api.errors import install_error_handlers
from pricereports.core.config import settings
from pricereports.core.database import engine, init_db
from pricereports.core.logging_config import configure_logging, log_attributes
from pricereports.core.rate_limit import limiter
from pricereports.core.security import add_security_headers
from pricereports.services.notifier import Notifier

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup - initialize database
    await init_db()
    app.state.notifier = Notifier()

    logger.info("API Startup Complete")
    log_attributes(logger, {
        "Port": settings.PORT,
        "Version": settings.VERSION,
        "Environment": settings.ENVIRONMENT,
    })

    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Price Reports API",
    description="Crowd-sourced store price reports with change-only persistence",
    version=settings.VERSION,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Security headers
app.middleware("http")(add_security_headers)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(reports.router, tags=["Reports"])


@app.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def catch_all(path: str):
    return Response(status_code=204)
