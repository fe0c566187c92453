import logging

from simplestripe import stripe_service
from simplestripe.errors import RemoteError
from simplestripe.reconciliation import ReconciliationSource, mark_paid_if_unpaid

logger = logging.getLogger(__name__)


def handle_return(session_id, config, store, sdk_ready=True):
    """Confirm payment when the shopper lands on the thank-you page.

    Returns the reconciliation outcome, or None when nothing was attempted.
    Failures are logged and never reach the shopper; the webhook will
    reconcile the order instead.
    """
    if not session_id:
        return None
    if not sdk_ready or not config.secret_key:
        logger.warning("Cannot verify checkout session %s: Stripe SDK or secret key missing", session_id)
        return None

    try:
        session = stripe_service.retrieve_checkout_session(session_id, config.secret_key)
    except RemoteError as e:
        logger.warning("Could not retrieve checkout session %s: %s", session_id, e)
        return None

    order_id = session.metadata.get("order_id")
    if session.payment_status != "paid" or not order_id:
        logger.info("Checkout session %s not paid yet (status %s)", session_id, session.payment_status)
        return None

    return mark_paid_if_unpaid(
        store,
        order_id,
        payment_reference=session.payment_intent,
        source=ReconciliationSource.REDIRECT,
    )
