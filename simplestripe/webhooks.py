import logging

import stripe
from pydantic import ValidationError

from simplestripe.errors import VerificationError
from simplestripe.reconciliation import ReconciliationSource, mark_paid_if_unpaid
from simplestripe.schemas import WebhookEvent

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED_EVENTS = frozenset({
    "checkout.session.completed",
    "payment_intent.succeeded",
    "charge.succeeded",
})


def _parse(payload):
    try:
        return WebhookEvent.model_validate_json(payload)
    except ValidationError as e:
        raise VerificationError("Invalid payload") from e


def verify(raw_payload, signature_header, endpoint_secret):
    """Check the Stripe-Signature header and parse the event.

    With no endpoint secret configured the payload is trusted as-is. That
    mode exists for local development only.
    """
    try:
        payload = raw_payload.decode("utf-8") if isinstance(raw_payload, bytes) else raw_payload
    except UnicodeDecodeError as e:
        raise VerificationError("Invalid payload") from e

    if not endpoint_secret:
        logger.warning("Webhook signing secret not configured; accepting unverified webhook payload")
        return _parse(payload)

    if not signature_header:
        raise VerificationError("Missing Stripe-Signature header")
    try:
        stripe.WebhookSignature.verify_header(
            payload,
            signature_header,
            endpoint_secret,
            stripe.Webhook.DEFAULT_TOLERANCE,
        )
    except stripe.SignatureVerificationError as e:
        raise VerificationError(str(e)) from e
    return _parse(payload)


def event_order_id(event):
    metadata = event.data.object.metadata or {}
    return metadata.get("order_id")


def event_payment_reference(event):
    obj = event.data.object
    if event.type == "payment_intent.succeeded":
        return obj.id
    reference = obj.payment_intent
    if isinstance(reference, dict):
        return reference.get("id")
    return reference


def process_event(event, store):
    if event.type not in PAYMENT_SUCCEEDED_EVENTS:
        logger.debug("Ignoring webhook event %s of type %s", event.id, event.type)
        return None

    order_id = event_order_id(event)
    if not order_id:
        logger.info("Webhook event %s (%s) carries no order_id; ignored", event.id, event.type)
        return None

    return mark_paid_if_unpaid(
        store,
        order_id,
        payment_reference=event_payment_reference(event),
        source=ReconciliationSource.WEBHOOK,
    )


def handle_webhook(payload, signature_header, config, store, sdk_ready=True):
    """Returns (status_code, body) for the webhook endpoint."""
    if not sdk_ready or not config.secret_key:
        return 400, {"error": "Stripe SDK or secret key missing."}

    try:
        event = verify(payload, signature_header, config.webhook_secret)
    except VerificationError as e:
        logger.warning("Rejected webhook: %s", e)
        return 400, {"error": str(e)}

    process_event(event, store)
    return 200, {"status": "ok"}
