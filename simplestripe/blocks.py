"""Payment method data for the block-based checkout.

Kept separate from the classic gateway; both share the availability gate.
"""
from simplestripe.gateway import GATEWAY_ID, METHOD_TITLE, is_available

DEFAULT_TITLE = "Pay by card"
CHECKOUT_CONTENT = "Pay securely through Stripe Checkout."
SUPPORTS = ["products"]


def is_active(config, current_currency, sdk_ready=True):
    return is_available(config, current_currency, sdk_ready)


def get_payment_method_data(config):
    return {
        "name": GATEWAY_ID,
        "title": config.title or DEFAULT_TITLE,
        "description": config.description or "",
        "supports": list(SUPPORTS),
    }


def registration_data(config):
    data = get_payment_method_data(config)
    data.update({
        "label": METHOD_TITLE,
        "ariaLabel": METHOD_TITLE,
        "content": CHECKOUT_CONTENT,
        "canMakePayment": True,
    })
    return data
