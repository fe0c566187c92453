from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text

from simplestripe.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_key = Column(String, unique=True, index=True)
    total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    billing_email = Column(String)
    status = Column(String, default="pending")           # slug from order_statuses
    date_paid = Column(DateTime(timezone=True))          # set once, never cleared
    transaction_id = Column(String)                      # Stripe PaymentIntent ID

    @property
    def is_paid(self):
        return self.date_paid is not None


class OrderNote(Base):
    __tablename__ = "order_notes"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    note = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class OrderStatus(Base):
    __tablename__ = "order_statuses"

    slug = Column(String, primary_key=True)
    label = Column(String, nullable=False)


class Option(Base):
    __tablename__ = "options"

    name = Column(String, primary_key=True)
    value = Column(JSON)
