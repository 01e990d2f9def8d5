"""
FastAPI application factory and configuration.

This module builds the service from explicitly injected collaborators
(record store, alert sender, error log), registers the error handlers
and routes, and manages lifespan events.

Run with:
    uvicorn src.api.main:create_app --factory
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src.adapters.alerts import ConsoleAlertSender, SendGridAlertSender
from src.adapters.errorlog import FileErrorLog
from src.adapters.store import JsonFileUserStore
from src.api.error_handlers import register_error_handlers
from src.api.routes import router
from src.config.settings import Settings, get_settings
from src.domain.pipeline import ErrorPipeline
from src.domain.ports import AlertSender, ErrorLog, UserStore

logger = logging.getLogger(__name__)


def build_alert_sender(settings: Settings) -> AlertSender:
    """SendGrid when an API key is configured, console logging otherwise."""
    if settings.sendgrid_api_key:
        return SendGridAlertSender(settings.sendgrid_api_key, api_url=settings.sendgrid_api_url)
    logger.warning("SENDGRID_API_KEY not set, alerts will be logged to the console")
    return ConsoleAlertSender()


def create_app(
    settings: Settings | None = None,
    user_store: UserStore | None = None,
    alert_sender: AlertSender | None = None,
    error_log: ErrorLog | None = None,
) -> FastAPI:
    """
    Build the service.

    Collaborators that are not injected are built from settings.
    Senders built here are closed on shutdown; injected ones are left
    to their owner.
    """
    settings = settings or get_settings()
    user_store = user_store or JsonFileUserStore(settings.data_file)
    error_log = error_log or FileErrorLog(settings.error_log_file)
    owns_sender = alert_sender is None
    if alert_sender is None:
        alert_sender = build_alert_sender(settings)

    pipeline = ErrorPipeline.standard(
        error_log,
        alert_sender,
        recipient=settings.alert_to,
        from_address=settings.alert_from,
        subject=settings.alert_subject,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        FastAPI lifespan context manager.

        On shutdown, waits for in-flight alerts (no cancellation) and
        closes the alert sender if it was built here.
        """
        logger.info("Starting application...")
        yield
        logger.info("Shutting down application...")
        await pipeline.drain()
        if owns_sender and isinstance(alert_sender, SendGridAlertSender):
            await alert_sender.aclose()
        logger.info("Pending alerts settled")

    app = FastAPI(
        title="accounts",
        description="User registration and login with an ordered error pipeline",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Collaborators for dependency injection
    app.state.settings = settings
    app.state.user_store = user_store
    app.state.error_pipeline = pipeline

    register_error_handlers(app)
    app.include_router(router)
    return app


def serve() -> None:
    """Run the service with uvicorn on the configured port."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("server running on: %s", settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    serve()
