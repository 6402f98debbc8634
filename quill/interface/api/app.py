"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from quill.interface.api.routes import comments, health, users
from quill.interface.error import register_error_handlers
from quill.util.di.container import container_lifespan, create_container, setup_di
from quill.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (production container if None)
    """
    # Settings are loaded from environment automatically
    container = container or create_container()

    app_instance = FastAPI(
        title="Quill Comments API",
        description="Threaded comments for the Quill blogging platform",
        version="0.1.0",
        lifespan=container_lifespan(container),
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    register_error_handlers(app_instance)
    setup_di(app_instance, container)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(users.router)

    return app_instance
