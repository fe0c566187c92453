class SimpleStripeError(Exception):
    """Base class for gateway failures contained at a request boundary."""


class ConfigurationError(SimpleStripeError):
    """Missing credentials or an unusable Stripe SDK."""


class RemoteError(SimpleStripeError):
    """Stripe rejected or failed an API call."""


class VerificationError(SimpleStripeError):
    """A webhook payload failed signature or format checks."""


class NotFoundError(SimpleStripeError):
    """No order matches the given identifier."""
