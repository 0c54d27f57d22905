"""Per-type event handlers.

Each handler receives a verified Event and only logs what it saw. Business
logic (order fulfilment, emails, access provisioning) hooks in here.
"""

import logging
from datetime import datetime, timezone

from app.events.base import Event

logger = logging.getLogger(__name__)


def _money(amount, currency) -> str:
    if amount is None:
        return f"? {currency or ''}".rstrip()
    return f"{amount / 100:.2f} {currency or ''}".rstrip()


def _iso(ts) -> str:
    if not ts:
        return "unknown"
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()
    except (OverflowError, ValueError, OSError, TypeError):
        return str(ts)


def payment_intent_created(event: Event) -> None:
    intent = event.resource
    logger.info(f"Payment intent created: {intent.get('id')}")
    logger.info(f"   Amount: {_money(intent.get('amount'), intent.get('currency'))}")
    logger.info(f"   Customer: {intent.get('customer') or 'Guest'}")


def payment_intent_succeeded(event: Event) -> None:
    intent = event.resource
    logger.info(f"Payment succeeded for {_money(intent.get('amount'), intent.get('currency'))}")
    logger.info(f"   Payment Intent ID: {intent.get('id')}")
    logger.info(f"   Customer: {intent.get('customer') or 'Guest'}")


def payment_intent_payment_failed(event: Event) -> None:
    intent = event.resource
    last_error = intent.get("last_payment_error") or {}
    logger.info(f"Payment failed for {_money(intent.get('amount'), intent.get('currency'))}")
    logger.info(f"   Payment Intent ID: {intent.get('id')}")
    logger.info(f"   Failure reason: {last_error.get('message') or 'Unknown'}")


def customer_created(event: Event) -> None:
    customer = event.resource
    logger.info(f"New customer created: {customer.get('email') or customer.get('id')}")
    logger.info(f"   Customer ID: {customer.get('id')}")
    logger.info(f"   Created: {_iso(customer.get('created'))}")


def invoice_payment_succeeded(event: Event) -> None:
    invoice = event.resource
    logger.info(f"Invoice payment succeeded: {invoice.get('number')}")
    logger.info(f"   Amount: {_money(invoice.get('amount_paid'), invoice.get('currency'))}")
    logger.info(f"   Customer: {invoice.get('customer')}")


def checkout_session_completed(event: Event) -> None:
    session = event.resource
    logger.info(f"Checkout session completed: {session.get('id')}")
    logger.info(f"   Payment status: {session.get('payment_status')}")
    logger.info(f"   Amount total: {_money(session.get('amount_total'), session.get('currency'))}")


def subscription_created(event: Event) -> None:
    subscription = event.resource
    logger.info(f"New subscription created: {subscription.get('id')}")
    logger.info(f"   Customer: {subscription.get('customer')}")
    logger.info(f"   Status: {subscription.get('status')}")


def subscription_updated(event: Event) -> None:
    subscription = event.resource
    logger.info(f"Subscription updated: {subscription.get('id')}")
    logger.info(f"   Status: {subscription.get('status')}")
    logger.info(f"   Current period end: {_iso(subscription.get('current_period_end'))}")


def subscription_deleted(event: Event) -> None:
    subscription = event.resource
    logger.info(f"Subscription cancelled: {subscription.get('id')}")
    logger.info(f"   Customer: {subscription.get('customer')}")
    logger.info(f"   Cancelled at: {_iso(subscription.get('canceled_at'))}")


DEFAULT_HANDLERS = {
    "payment_intent.created": payment_intent_created,
    "payment_intent.succeeded": payment_intent_succeeded,
    "payment_intent.payment_failed": payment_intent_payment_failed,
    "customer.created": customer_created,
    "invoice.payment_succeeded": invoice_payment_succeeded,
    "checkout.session.completed": checkout_session_completed,
    "customer.subscription.created": subscription_created,
    "customer.subscription.updated": subscription_updated,
    "customer.subscription.deleted": subscription_deleted,
}
