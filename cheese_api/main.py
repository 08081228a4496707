"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cheese_api.api import auth, cheeses, users
from cheese_api.api.errors import register_error_handlers
from cheese_api.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure the root logger once from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    configure_logging()
    logger.info(f"Starting Cheese Listings API ({settings.environment})")
    yield
    logger.info("Shutting down Cheese Listings API")


app = FastAPI(
    title="Cheese Listings API",
    description="Marketplace of cheese listings owned by users, with JWT authentication",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count"],
    )

register_error_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(cheeses.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
