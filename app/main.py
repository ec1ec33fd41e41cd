# app/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import create_app
from app.data.database import init_db
from app.data.seed import seed
from app.utils.settings import SEED_PRODUCTS
from app.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database")
    init_db()
    if SEED_PRODUCTS:
        seed()
    logger.info("Database ready")
    yield


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
