from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ProductData(BaseModel):
    name: str


class PriceData(BaseModel):
    currency: str
    product_data: ProductData
    unit_amount: int


class LineItem(BaseModel):
    price_data: PriceData
    quantity: int = 1


class SessionRequest(BaseModel):
    """Parameters for stripe.checkout.Session.create."""
    payment_method_types: list[str] = ["card"]
    line_items: list[LineItem]
    mode: Literal["payment"] = "payment"
    customer_email: str | None = None
    success_url: str
    cancel_url: str
    metadata: dict[str, str]


class PaymentResult(BaseModel):
    result: Literal["success", "fail"]
    redirect: str | None = None
    notices: list[str] = []


class CheckoutSession(BaseModel):
    id: str
    url: str | None = None
    payment_status: str | None = None
    payment_intent: str | None = None
    metadata: dict[str, str] = {}


class WebhookObject(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    object: str | None = None
    metadata: dict[str, Any] | None = None
    payment_intent: Any = None


class WebhookEventData(BaseModel):
    object: WebhookObject = Field(default_factory=WebhookObject)


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str | None = None
    data: WebhookEventData = Field(default_factory=WebhookEventData)


class OrderView(BaseModel):
    order_id: int
    status: str
    is_paid: bool
    actions: list[str]
