import stripe

from simplestripe.errors import RemoteError
from simplestripe.schemas import CheckoutSession, SessionRequest

# Stripe.js replaces this placeholder with the real session id on redirect.
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def sdk_loaded():
    return hasattr(stripe, "checkout") and hasattr(stripe, "WebhookSignature")


def _object_id(value):
    if value is None or isinstance(value, str):
        return value
    return getattr(value, "id", None)


def _to_session(obj):
    metadata = getattr(obj, "metadata", None) or {}
    if hasattr(metadata, "to_dict"):
        metadata = metadata.to_dict()
    return CheckoutSession(
        id=obj.id,
        url=getattr(obj, "url", None),
        payment_status=getattr(obj, "payment_status", None),
        payment_intent=_object_id(getattr(obj, "payment_intent", None)),
        metadata={key: str(value) for key, value in dict(metadata).items()},
    )


def create_checkout_session(request: SessionRequest, api_key: str):
    try:
        session = stripe.checkout.Session.create(
            api_key=api_key,
            **request.model_dump(exclude_none=True),
        )
    except stripe.StripeError as e:
        raise RemoteError(e.user_message or str(e)) from e
    return _to_session(session)


def retrieve_checkout_session(session_id: str, api_key: str):
    try:
        session = stripe.checkout.Session.retrieve(session_id, api_key=api_key)
    except stripe.StripeError as e:
        raise RemoteError(e.user_message or str(e)) from e
    return _to_session(session)
