import logging
from datetime import datetime, timezone

from sqlalchemy import select, update

from simplestripe.models import Order, OrderNote, OrderStatus

logger = logging.getLogger(__name__)

DEFAULT_ORDER_STATUSES = {
    "pending": "Pending payment",
    "processing": "Processing",
    "on-hold": "On hold",
    "completed": "Completed",
    "cancelled": "Cancelled",
    "refunded": "Refunded",
    "failed": "Failed",
}

PAID_STATUS = "processing"
PAYABLE_STATUSES = ["pending", "failed"]
# Largest id the orders table can store (signed 64-bit INTEGER)
MAX_ORDER_ID = 2**63 - 1


def seed_order_statuses(db):
    if db.scalar(select(OrderStatus.slug).limit(1)) is not None:
        return
    db.add_all(OrderStatus(slug=slug, label=label) for slug, label in DEFAULT_ORDER_STATUSES.items())
    db.commit()


def parse_order_id(value):
    """Order ids arrive as strings in URLs and Stripe metadata."""
    try:
        order_id = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    if order_id <= 0 or order_id > MAX_ORDER_ID:
        return None
    return order_id


def valid_statuses_for_payment(order):
    if order is None or order.is_paid:
        return []
    return list(PAYABLE_STATUSES)


def needs_payment(order):
    return order.status in valid_statuses_for_payment(order)


def customer_actions(order):
    """Actions offered to the shopper; paid orders cannot be paid or cancelled again."""
    if needs_payment(order):
        return ["pay", "view", "cancel"]
    return ["view"]


class OrderStore:
    """Order collaborator backed by the commerce system's tables."""

    def __init__(self, db):
        self.db = db

    def get(self, order_id):
        order_id = parse_order_id(order_id)
        if order_id is None:
            return None
        return self.db.get(Order, order_id)

    def mark_paid(self, order_id, transaction_id=None):
        """Check-and-set the paid flag; returns False if the order was already paid."""
        result = self.db.execute(
            update(Order)
            .where(Order.id == order_id, Order.date_paid.is_(None))
            .values(
                date_paid=datetime.now(timezone.utc),
                status=PAID_STATUS,
                transaction_id=transaction_id,
            )
        )
        self.db.commit()
        return result.rowcount == 1

    def valid_statuses(self):
        return {row.slug: row.label for row in self.db.scalars(select(OrderStatus))}

    def set_status(self, order_id, status, note=""):
        order = self.db.get(Order, order_id)
        previous = order.status
        order.status = status
        if note:
            self.db.add(OrderNote(order_id=order_id, note=note))
        self.db.commit()
        logger.debug("Order %s status %s -> %s", order_id, previous, status)

    def add_note(self, order_id, note):
        self.db.add(OrderNote(order_id=order_id, note=note))
        self.db.commit()

    def notes(self, order_id):
        return list(self.db.scalars(
            select(OrderNote.note).where(OrderNote.order_id == order_id).order_by(OrderNote.id)
        ))
