"""Application configuration via pydantic-settings."""

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VerificationMode = Literal["strict", "permissive-test"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    log_level: str = "info"
    allowed_origins: list[str] = ["*"]
    port: int = 4242

    # Stripe
    stripe_secret_key: str = ""  # outbound API calls (/account)
    stripe_webhook_secret: str = ""  # whsec_... shared with the sender
    stripe_api_base: str = "https://api.stripe.com/v1"

    # Webhook ingestion
    # "auto" picks strict when a webhook secret is set, permissive-test otherwise
    webhook_verification_mode: Literal["auto", "strict", "permissive-test"] = "auto"
    webhook_tolerance_seconds: int = 300
    last_webhook_file: str = "data/last_webhook.json"

    @property
    def webhook_secret_configured(self) -> bool:
        return bool(self.stripe_webhook_secret)

    def resolve_verification_mode(self) -> VerificationMode:
        """Pick the verifier operating mode once, at startup."""
        mode = self.webhook_verification_mode
        if mode == "auto":
            mode = "strict" if self.webhook_secret_configured else "permissive-test"

        if mode == "permissive-test" and not self.webhook_secret_configured:
            logger.warning(
                "STRIPE_WEBHOOK_SECRET not set: webhook signatures will NOT be verified "
                "(permissive-test mode). Never run this configuration in production."
            )
        elif mode == "strict" and not self.webhook_secret_configured:
            logger.warning(
                "STRIPE_WEBHOOK_SECRET not set in strict mode: every webhook will be rejected"
            )
        return mode


settings = Settings()
