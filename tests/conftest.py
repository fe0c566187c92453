import hashlib
import hmac
import os
import time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

# Must be set before simplestripe.database is imported
os.environ["DATABASE_URL"] = "sqlite:///./test_simplestripe.db"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["STORE_URL"] = "https://shop.example"

from simplestripe.database import Base, engine, SessionLocal  # noqa: E402
from simplestripe.models import Order  # noqa: E402
from simplestripe.orders import seed_order_statuses  # noqa: E402
from simplestripe.settings import SettingsStore, SettingsUpdate  # noqa: E402


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_order_statuses(session)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_order(db):
    def _make(order_id=42, total="10.00", currency="USD", email="shopper@example.com", status="pending"):
        order = Order(
            id=order_id,
            order_key=f"wc_order_{order_id}",
            total=Decimal(total),
            currency=currency,
            billing_email=email,
            status=status,
        )
        db.add(order)
        db.commit()
        return order
    return _make


@pytest.fixture
def configure(db):
    def _configure(**values):
        settings = {"test_secret_key": "sk_test_123", "webhook_secret": "whsec_test"}
        settings.update(values)
        return SettingsStore(db).update(SettingsUpdate(**settings))
    return _configure


def _sign(payload, secret, timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def sign():
    return _sign


@pytest.fixture
def client():
    from simplestripe.main import app
    with TestClient(app) as c:
        yield c
