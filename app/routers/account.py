"""Stripe account lookup - thin proxy to GET /v1/account."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.dependencies import ReceiverContext, get_receiver
from app.errors import parse_stripe_error

router = APIRouter()
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

_TIMEOUT = 30.0


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=_TIMEOUT)


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


@router.get("/account")
@limiter.limit("30/minute")
async def get_account(request: Request, receiver: ReceiverContext = Depends(get_receiver)):
    """Fetch the connected Stripe account details."""
    settings = receiver.settings
    if not settings.stripe_secret_key:
        return _error("Stripe secret key not configured (STRIPE_SECRET_KEY not set)")

    try:
        async with _client() as client:
            response = await client.get(
                f"{settings.stripe_api_base.rstrip('/')}/account",
                headers={"Authorization": f"Bearer {settings.stripe_secret_key}"},
            )
    except httpx.TimeoutException:
        logger.error("Stripe account lookup timed out")
        return _error("Stripe API timed out")
    except httpx.HTTPError as e:
        logger.error(f"Stripe account lookup failed: {e}")
        return _error(f"Stripe API unreachable: {e}")

    if not response.is_success:
        message = parse_stripe_error(response.text)
        logger.error(f"Stripe API error {response.status_code}: {message}")
        return _error(message)

    return response.json()
