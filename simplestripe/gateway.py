"""Stripe Checkout payment gateway.

Offers the gateway at checkout when it is configured for the store currency,
and turns an order into a hosted checkout session the shopper is redirected
to. Payment confirmation happens later in `redirect` or `webhooks`.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from simplestripe import stripe_service
from simplestripe.errors import ConfigurationError, NotFoundError, RemoteError
from simplestripe.orders import needs_payment
from simplestripe.schemas import LineItem, PaymentResult, PriceData, ProductData, SessionRequest

logger = logging.getLogger(__name__)

GATEWAY_ID = "simplestripe"
METHOD_TITLE = "Pay by Card (Stripe)"


def is_available(config, current_currency, sdk_ready=True):
    if not config.enabled:
        return False
    if not config.secret_key:
        return False
    if (current_currency or "").upper() not in config.supported_currencies:
        return False
    if not sdk_ready:
        return False
    return True


def to_minor_units(total):
    """Amount in cents, rounded half-up. Assumes a 2-decimal currency."""
    amount = Decimal(str(total)) * 100
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def with_query(url, query):
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def return_url(order, store_url):
    return f"{store_url}/checkout/order-received/{order.id}?key={order.order_key}"


def cancel_url(order, store_url):
    return f"{store_url}/cart?cancel_order=true&order={order.order_key}&order_id={order.id}"


def build_session_request(order, return_url, cancel_url):
    amount = to_minor_units(order.total)
    if amount <= 0:
        raise ValueError("Order total must be greater than zero.")

    return SessionRequest(
        line_items=[
            LineItem(
                price_data=PriceData(
                    currency=order.currency.lower(),
                    product_data=ProductData(name=f"Order #{order.id}"),
                    unit_amount=amount,
                ),
                quantity=1,
            )
        ],
        customer_email=order.billing_email or None,
        success_url=with_query(return_url, f"session_id={stripe_service.SESSION_ID_PLACEHOLDER}"),
        cancel_url=cancel_url,
        metadata={
            "order_id": str(order.id),
            "billing_email": order.billing_email or "",
        },
    )


def _fail(message):
    return PaymentResult(result="fail", notices=[message])


def process_payment(order_id, config, store, store_url, sdk_ready=True):
    """Create a Checkout Session for the order and return where to send the shopper.

    Every failure is reported as a "fail" result carrying a checkout notice;
    the order itself is never modified here.
    """
    try:
        if not sdk_ready:
            raise ConfigurationError("Stripe SDK could not be loaded. Please check the gateway settings.")
        if not config.secret_key:
            raise ConfigurationError("Stripe secret key is missing. Please check the gateway settings.")

        order = store.get(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} was not found.")
        if not needs_payment(order):
            return _fail("This order has already been paid or cannot be paid.")

        request = build_session_request(order, return_url(order, store_url), cancel_url(order, store_url))
        session = stripe_service.create_checkout_session(request, config.secret_key)
    except (ConfigurationError, NotFoundError, ValueError) as e:
        logger.warning("Payment for order %s not started: %s", order_id, e)
        return _fail(str(e))
    except RemoteError as e:
        logger.warning("Stripe rejected checkout session for order %s: %s", order_id, e)
        return _fail(f"Stripe error: {e}")

    logger.info("Checkout session %s created for order %s", session.id, order.id)
    return PaymentResult(result="success", redirect=session.url)
