from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.dispatcher import build_http_client
from settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    http_client = build_http_client(get_settings())
    app.state.http_client = http_client
    try:
        yield
    finally:
        await http_client.aclose()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="AQI Notify",
        description="Air-quality monitor that relays AQICN readings to Telegram.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
