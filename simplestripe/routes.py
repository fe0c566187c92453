from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from simplestripe import blocks, gateway, redirect, stripe_service, webhooks
from simplestripe.auth import verify_token
from simplestripe.config import store_url
from simplestripe.database import get_db
from simplestripe.orders import OrderStore, customer_actions
from simplestripe.schemas import OrderView, PaymentResult
from simplestripe.settings import FORM_FIELDS, SettingsStore, SettingsUpdate, masked

router = APIRouter()


@router.post("/simplestripe/v1/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db),
):
    payload = await request.body()
    config = SettingsStore(db).load()

    status_code, body = webhooks.handle_webhook(
        payload,
        stripe_signature,
        config,
        OrderStore(db),
        sdk_ready=stripe_service.sdk_loaded(),
    )
    return JSONResponse(status_code=status_code, content=body)


@router.get("/checkout/order-received/{order_id}", response_model=OrderView)
def order_received(
    order_id: int,
    key: str = "",
    session_id: str = "",
    db: Session = Depends(get_db),
):
    store = OrderStore(db)
    order = store.get(order_id)
    if order is None or order.order_key != key:
        raise HTTPException(status_code=404, detail="Order not found")

    config = SettingsStore(db).load()
    redirect.handle_return(session_id, config, store, sdk_ready=stripe_service.sdk_loaded())

    db.refresh(order)
    return OrderView(
        order_id=order.id,
        status=order.status,
        is_paid=order.is_paid,
        actions=customer_actions(order),
    )


@router.post("/checkout/{order_id}/pay", response_model=PaymentResult)
def pay_order(order_id: int, db: Session = Depends(get_db)):
    settings = SettingsStore(db)
    config = settings.load()
    sdk_ready = stripe_service.sdk_loaded()

    if not gateway.is_available(config, settings.store_currency(), sdk_ready):
        return PaymentResult(result="fail", notices=[f"{gateway.METHOD_TITLE} is not available."])

    return gateway.process_payment(order_id, config, OrderStore(db), store_url(), sdk_ready=sdk_ready)


@router.get("/simplestripe/v1/payment-method")
def payment_method(db: Session = Depends(get_db)):
    settings = SettingsStore(db)
    config = settings.load()
    if not blocks.is_active(config, settings.store_currency(), stripe_service.sdk_loaded()):
        return {"active": False}
    return {"active": True, **blocks.registration_data(config)}


@router.get("/simplestripe/v1/settings")
def read_settings(db: Session = Depends(get_db), auth=Depends(verify_token)):
    return {"fields": FORM_FIELDS, "values": masked(SettingsStore(db).raw())}


@router.put("/simplestripe/v1/settings")
def update_settings(changes: SettingsUpdate, db: Session = Depends(get_db), auth=Depends(verify_token)):
    store = SettingsStore(db)
    store.update(changes)
    return {"values": masked(store.raw())}
