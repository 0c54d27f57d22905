"""Stripe Webhook Observer - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import Settings, settings
from app.dependencies import build_context
from app.events import HandlerRegistry
from app.routers import account, health, webhooks

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    receiver = app.state.receiver
    port = receiver.settings.port
    logger.info(f"Stripe Webhook Observer listening on port {port}")
    logger.info(f"Webhook endpoint: http://localhost:{port}/webhook")
    logger.info(f"Webhook secret configured: {receiver.settings.webhook_secret_configured}")
    logger.info(f"Verification mode: {receiver.verifier.mode}")
    logger.info("Supported event types:")
    for event_type in receiver.registry:
        logger.info(f"   - {event_type}")
    logger.info("To test with Stripe CLI:")
    logger.info(f"   stripe listen --forward-to localhost:{port}/webhook")
    yield


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(app_settings: Settings | None = None, registry: HandlerRegistry | None = None) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(
        title="Stripe Webhook Observer",
        description="Receives, verifies and records Stripe webhook events",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.receiver = build_context(app_settings, registry)

    # Rate limiting (outbound Stripe lookups only; webhooks are never throttled)
    app.state.limiter = account.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, _unhandled_error)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(webhooks.router, tags=["webhooks"])
    app.include_router(account.router, tags=["account"])
    return app


app = create_app()
