import logging

from fastapi import FastAPI

from simplestripe import models  # noqa: F401  registers tables
from simplestripe.config import log_level
from simplestripe.database import Base, engine, SessionLocal
from simplestripe.orders import seed_order_statuses
from simplestripe.routes import router

logging.basicConfig(
    level=log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="SimpleStripe Checkout Gateway")

app.include_router(router)

Base.metadata.create_all(bind=engine)

with SessionLocal() as db:
    seed_order_statuses(db)
