from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shortlink_app.config import settings
from shortlink_app.api.errors import add_error_handlers
from shortlink_app.api.v1 import urls, redirect
from shortlink_app.dependencies import (
    get_analytics_store,
    get_code_generator,
    get_locator,
    get_registry,
    get_url_service,
)
from shortlink_app.logging_config import configure_logging
from shortlink_app.middleware.logging import add_logging_middleware
from shortlink_app.sweeper.expiry_sweeper import ExpirySweeper

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the expiry sweeper when a retention window is configured"""
    sweeper = None
    if settings.expired_retention_minutes is not None:
        service = get_url_service(
            registry=get_registry(),
            analytics=get_analytics_store(),
            code_generator=get_code_generator(),
            locator=get_locator()
        )
        sweeper = ExpirySweeper(
            service,
            interval_seconds=settings.sweeper_interval_seconds,
            retention_minutes=settings.expired_retention_minutes
        )
        sweeper.start()

    yield

    if sweeper is not None:
        await sweeper.stop()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="An in-memory URL shortener with expiry and click analytics",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_logging_middleware(app)
add_error_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/api/health"
    }


######## Include routers
app.include_router(urls.router)
# Catch-all short code route goes last
app.include_router(redirect.router)
