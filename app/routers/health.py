from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.dependencies import ReceiverContext, get_receiver


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    timestamp: str
    webhook_secret_configured: bool = Field(alias="webhookSecretConfigured")
    verification_mode: str = Field(alias="verificationMode")


class ServiceInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    endpoints: dict[str, str]
    webhook_secret_configured: bool = Field(alias="webhookSecretConfigured")
    supported_events: list[str] = Field(alias="supportedEvents")


ENDPOINTS = {
    "webhook": "/webhook",
    "health": "/health",
    "lastWebhook": "/last-webhook",
    "account": "/account",
}


@router.get("/health", response_model=HealthResponse)
async def health_check(receiver: ReceiverContext = Depends(get_receiver)):
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        webhook_secret_configured=receiver.settings.webhook_secret_configured,
        verification_mode=receiver.verifier.mode,
    )


@router.get("/", response_model=ServiceInfo)
async def service_info(receiver: ReceiverContext = Depends(get_receiver)):
    return ServiceInfo(
        message="Stripe Webhook Observer is running!",
        endpoints=ENDPOINTS,
        webhook_secret_configured=receiver.settings.webhook_secret_configured,
        supported_events=list(receiver.registry),
    )
