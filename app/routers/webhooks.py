"""Webhook ingestion endpoint - verify, route, persist, acknowledge."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from app.auth.stripe_signature import SIGNATURE_HEADER
from app.dependencies import ReceiverContext, get_receiver
from app.errors import PersistError, VerificationError
from app.events import route

router = APIRouter()
logger = logging.getLogger(__name__)


class WebhookAck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    received: bool = True
    event_type: str = Field(alias="eventType")
    event_id: str = Field(alias="eventId")


@router.post("/webhook", response_model=WebhookAck, response_model_by_alias=True)
async def receive_webhook(request: Request, receiver: ReceiverContext = Depends(get_receiver)):
    """Receive a Stripe event.

    Returns 400 only when the delivery cannot be authenticated. Once verified,
    the event is acknowledged with 200 whatever the handler or the store do.
    """
    payload = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        event = receiver.verifier.verify(payload, signature, request.headers.get("content-type"))
    except VerificationError as e:
        logger.error(f"Webhook signature verification failed: {e.reason}")
        return PlainTextResponse(f"Webhook Error: {e.reason}", status_code=400)

    if receiver.verifier.authenticates:
        logger.info(f"Webhook signature verified for event: {event.type}")
    else:
        logger.warning(f"Signature verification skipped for event: {event.type}")

    logger.info(f"Received event: {event.type}")
    logger.info(f"   Event ID: {event.id}")
    logger.info(f"   Created: {event.created_at}")
    logger.info(f"   Live mode: {event.livemode}")

    # Handler errors are already logged by route(); they never change the response
    route(event, receiver.registry)

    try:
        receiver.store.save(event.resource)
    except PersistError as e:
        logger.error(f"Failed to persist last webhook for {event.id}: {e}")

    return WebhookAck(event_type=event.type, event_id=event.id)


@router.get("/last-webhook")
async def last_webhook(receiver: ReceiverContext = Depends(get_receiver)):
    """Return the resource of the last accepted event, or null before the first one."""
    logger.info("Retrieving last webhook event from file...")
    try:
        return receiver.store.load()
    except PersistError as e:
        logger.error(f"Failed to read last webhook: {e}")
        return JSONResponse(status_code=500, content={"error": e.message})
