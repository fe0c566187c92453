"""Gateway settings persisted as a flat option record.

The record is read on every request so that administrator edits take effect
immediately. Components receive a `GatewayConfig` explicitly instead of
reading the option table themselves.
"""
from pydantic import BaseModel, ConfigDict

from simplestripe.models import Option

SETTINGS_OPTION = "simplestripe_settings"
CURRENCY_OPTION = "store_currency"
DEFAULT_STORE_CURRENCY = "USD"

SUPPORTED_CURRENCIES = ("RON", "EUR", "USD")

FORM_FIELDS = {
    "enabled": {
        "title": "Enable/Disable",
        "type": "checkbox",
        "label": "Enable Stripe card payments",
        "default": "yes",
    },
    "title": {
        "title": "Title",
        "type": "text",
        "default": "Pay by card",
    },
    "description": {
        "title": "Description",
        "type": "textarea",
        "description": "Optional text shown under the payment method on the checkout page.",
        "default": "",
    },
    "testmode": {
        "title": "Test mode",
        "type": "checkbox",
        "label": "Enable test mode",
        "default": "yes",
        "description": "If enabled, the test secret key will be used.",
    },
    "test_secret_key": {
        "title": "Test secret key",
        "type": "password",
        "description": "Enter your Stripe test secret key (sk_test_...)",
        "default": "",
    },
    "live_secret_key": {
        "title": "Live secret key",
        "type": "password",
        "description": "Enter your Stripe live secret key (sk_live_...)",
        "default": "",
    },
    "webhook_secret": {
        "title": "Webhook signing secret",
        "type": "password",
        "description": "Enter the endpoint secret from your Stripe dashboard (e.g. whsec_...). Used to validate webhooks.",
        "default": "",
    },
}


class GatewayConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    title: str = "Pay by card"
    description: str = ""
    testmode: bool = True
    test_secret_key: str = ""
    live_secret_key: str = ""
    webhook_secret: str = ""
    supported_currencies: tuple[str, ...] = SUPPORTED_CURRENCIES

    @property
    def secret_key(self):
        """Secret key for the active mode."""
        return self.test_secret_key if self.testmode else self.live_secret_key


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    title: str | None = None
    description: str | None = None
    testmode: bool | None = None
    test_secret_key: str | None = None
    live_secret_key: str | None = None
    webhook_secret: str | None = None


def _to_option_value(value):
    # Checkboxes are stored the way the settings form submits them.
    if isinstance(value, bool):
        return "yes" if value else "no"
    return value


class SettingsStore:
    def __init__(self, db):
        self.db = db

    def raw(self):
        option = self.db.get(Option, SETTINGS_OPTION)
        stored = dict(option.value or {}) if option else {}
        values = {name: field["default"] for name, field in FORM_FIELDS.items()}
        values.update(stored)
        return values

    def load(self):
        return GatewayConfig.model_validate(self.raw())

    def update(self, changes: SettingsUpdate):
        values = self.raw()
        for name, value in changes.model_dump(exclude_none=True).items():
            values[name] = _to_option_value(value)

        option = self.db.get(Option, SETTINGS_OPTION)
        if option is None:
            option = Option(name=SETTINGS_OPTION)
            self.db.add(option)
        option.value = values
        self.db.commit()
        return GatewayConfig.model_validate(values)

    def store_currency(self):
        option = self.db.get(Option, CURRENCY_OPTION)
        if option is None or not option.value:
            return DEFAULT_STORE_CURRENCY
        return str(option.value).upper()

    def set_store_currency(self, currency: str):
        option = self.db.get(Option, CURRENCY_OPTION)
        if option is None:
            option = Option(name=CURRENCY_OPTION)
            self.db.add(option)
        option.value = currency.upper()
        self.db.commit()


def masked(values):
    """Form values with password fields obscured for display."""
    shown = dict(values)
    for name, field in FORM_FIELDS.items():
        if field["type"] == "password" and shown.get(name):
            secret = str(shown[name])
            # Short secrets would be shown whole by the 4-character hint
            shown[name] = "*" * 8 + (secret[-4:] if len(secret) > 8 else "")
    return shown
