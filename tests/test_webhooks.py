import json
import time

import pytest

from simplestripe.errors import VerificationError
from simplestripe.orders import OrderStore
from simplestripe.webhooks import event_payment_reference, verify

SECRET = "whsec_test"


def _event(event_type="checkout.session.completed", order_id="42", **obj):
    data = {"id": "cs_test_1", "object": "checkout.session", "payment_intent": "pi_123"}
    if order_id is not None:
        data["metadata"] = {"order_id": order_id, "billing_email": "shopper@example.com"}
    data.update(obj)
    return json.dumps({"id": "evt_1", "type": event_type, "data": {"object": data}})


def _post(client, payload, signature):
    return client.post(
        "/simplestripe/v1/webhook",
        content=payload,
        headers={"stripe-signature": signature},
    )


def test_valid_signature_yields_event(sign):
    payload = _event()

    event = verify(payload.encode("utf-8"), sign(payload, SECRET), SECRET)

    assert event.type == "checkout.session.completed"
    assert event.data.object.metadata["order_id"] == "42"


def test_tampered_signature_is_rejected(sign):
    payload = _event()
    header = sign(payload, SECRET)[:-4] + "0000"

    with pytest.raises(VerificationError):
        verify(payload, header, SECRET)


def test_tampered_payload_is_rejected(sign):
    header = sign(_event(order_id="42"), SECRET)

    with pytest.raises(VerificationError):
        verify(_event(order_id="43"), header, SECRET)


def test_stale_timestamp_is_rejected(sign):
    payload = _event()
    header = sign(payload, SECRET, timestamp=int(time.time()) - 3600)

    with pytest.raises(VerificationError):
        verify(payload, header, SECRET)


def test_missing_signature_header_is_rejected():
    with pytest.raises(VerificationError):
        verify(_event(), None, SECRET)


def test_empty_secret_parses_without_verification():
    event = verify(_event(), None, "")

    assert event.type == "checkout.session.completed"
    assert event.data.object.metadata["order_id"] == "42"


def test_unparseable_payload_is_rejected():
    with pytest.raises(VerificationError):
        verify(b"not json", None, "")
    with pytest.raises(VerificationError):
        verify("[1, 2]", None, "")


def test_payment_reference_depends_on_event_type():
    intent = verify(_event("payment_intent.succeeded", id="pi_999", payment_intent=None), None, "")
    charge = verify(_event("charge.succeeded", id="ch_1", payment_intent="pi_555"), None, "")

    assert event_payment_reference(intent) == "pi_999"
    assert event_payment_reference(charge) == "pi_555"


def test_order_paid_once_when_webhook_is_redelivered(client, db, make_order, configure, sign, mocker):
    make_order(42, total="10.00", currency="USD")
    configure()

    session = mocker.Mock()
    session.id = "cs_test_1"
    session.url = "https://checkout.stripe.com/c/pay/cs_test_1"
    session.payment_status = "unpaid"
    session.payment_intent = None
    session.metadata = {}
    create = mocker.patch("stripe.checkout.Session.create", return_value=session)

    response = client.post("/checkout/42/pay")
    assert response.json()["result"] == "success"
    assert create.call_args.kwargs["metadata"]["order_id"] == "42"

    payload = _event("checkout.session.completed", order_id="42")
    for _ in range(2):
        response = _post(client, payload, sign(payload, SECRET))
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    db.expire_all()
    store = OrderStore(db)
    order = store.get(42)
    assert order.is_paid
    assert order.transaction_id == "pi_123"
    assert store.notes(42) == ["Stripe webhook: payment confirmed."]


def test_bad_signature_returns_400_without_reconciling(client, db, make_order, configure, sign):
    make_order(42)
    configure()
    payload = _event()

    response = _post(client, payload, sign(payload, "whsec_other"))

    assert response.status_code == 400
    assert "error" in response.json()
    db.expire_all()
    assert OrderStore(db).get(42).is_paid is False


def test_event_without_order_id_is_acknowledged(client, db, make_order, configure, sign):
    make_order(42)
    configure()
    payload = _event(order_id=None)

    response = _post(client, payload, sign(payload, SECRET))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    db.expire_all()
    assert OrderStore(db).get(42).is_paid is False


def test_other_event_types_are_ignored(client, db, make_order, configure, sign):
    make_order(42)
    configure()
    payload = _event("payment_intent.payment_failed")

    response = _post(client, payload, sign(payload, SECRET))

    assert response.status_code == 200
    db.expire_all()
    assert OrderStore(db).get(42).is_paid is False


def test_unsigned_webhook_accepted_when_no_secret_configured(client, db, make_order, configure):
    make_order(42)
    configure(webhook_secret="")

    response = client.post("/simplestripe/v1/webhook", content=_event())

    assert response.status_code == 200
    db.expire_all()
    assert OrderStore(db).get(42).is_paid is True


def test_webhook_without_secret_key_is_rejected(client, make_order, configure, sign):
    make_order(42)
    configure(test_secret_key="")
    payload = _event()

    response = _post(client, payload, sign(payload, SECRET))

    assert response.status_code == 400
    assert response.json() == {"error": "Stripe SDK or secret key missing."}


def test_webhook_without_sdk_is_rejected(client, configure, sign, mocker):
    configure()
    mocker.patch("simplestripe.stripe_service.sdk_loaded", return_value=False)
    payload = _event()

    response = _post(client, payload, sign(payload, SECRET))

    assert response.status_code == 400


def test_webhook_with_oversized_order_id_is_acknowledged(client, db, make_order, configure):
    make_order(42)
    configure(webhook_secret="")

    response = client.post("/simplestripe/v1/webhook", content=_event(order_id="99999999999999999999"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    db.expire_all()
    assert OrderStore(db).get(42).is_paid is False
