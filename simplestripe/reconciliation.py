"""Marks orders paid from either confirmation channel.

The thank-you redirect and the Stripe webhook race each other for the same
order. Both call `mark_paid_if_unpaid`; whichever arrives first performs the
transition and the other is a no-op. Atomicity per order comes from the
store's conditional update, not from locking here.
"""
import logging
from enum import Enum

from simplestripe.orders import parse_order_id

logger = logging.getLogger(__name__)

HOLD_STATUS = "on-hold"


class ReconciliationSource(str, Enum):
    REDIRECT = "redirect"
    WEBHOOK = "webhook"


class ReconciliationOutcome(str, Enum):
    PAID = "paid"
    ALREADY_PAID = "already_paid"
    NOT_FOUND = "not_found"


AUDIT_NOTES = {
    ReconciliationSource.REDIRECT: "Stripe payment confirmed.",
    ReconciliationSource.WEBHOOK: "Stripe webhook: payment confirmed.",
}


def mark_paid_if_unpaid(store, order_id, payment_reference=None, source=ReconciliationSource.WEBHOOK):
    order_id = parse_order_id(order_id)
    order = store.get(order_id)
    if order is None:
        logger.info("No order %s to reconcile from %s", order_id, source.value)
        return ReconciliationOutcome.NOT_FOUND

    if order.is_paid:
        logger.debug("Order %s already paid, ignoring %s confirmation", order_id, source.value)
        return ReconciliationOutcome.ALREADY_PAID

    if not store.mark_paid(order_id, payment_reference):
        # The other channel won between our read and the update.
        return ReconciliationOutcome.ALREADY_PAID

    note = AUDIT_NOTES[source]
    if HOLD_STATUS in store.valid_statuses():
        store.set_status(order_id, HOLD_STATUS, note)
    else:
        store.add_note(order_id, note)

    logger.info("Order %s marked paid via %s (reference %s)", order_id, source.value, payment_reference)
    return ReconciliationOutcome.PAID
