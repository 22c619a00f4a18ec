import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import carledger.models  # ensure models are registered
from carledger.core.config import CORS_ORIGINS, LOG_FORMAT, LOG_LEVEL
from carledger.core.logging_config import setup_logging
from carledger.initial_data import init_seed
from carledger.utils.database import engine, Base

from carledger.routers import (
    users_router,
    cars_router,
    expenses_router,
    loans_router,
    settings_router,
)

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger("carledger")

app = FastAPI(title="Car Ledger Backend API", version="1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(users_router.router)
app.include_router(cars_router.router)
app.include_router(expenses_router.router)
app.include_router(loans_router.router)
app.include_router(settings_router.router)


@app.get("/")
def root():
    return {"message": "Car Ledger Backend is running!!"}


@app.on_event("startup")
def on_startup():
    # DEV ONLY: no migrations yet
    Base.metadata.create_all(bind=engine)

    logger.info("Running initial database seeding")
    init_seed()
    logger.info("Seeding complete")
