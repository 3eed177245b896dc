"""FastAPI app and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from funkoshelf.api.routes import funkos
from funkoshelf.api.state import AppState, get_state

__all__ = ["app", "AppState", "get_state"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_state().store
    store.data_dir.mkdir(parents=True, exist_ok=True)
    logging.getLogger(__name__).info("HTTP gateway serving collections from %s", store.data_dir)
    yield


app = FastAPI(
    title="funkoshelf API",
    description="HTTP access to Funko collections, backed by the same dispatcher as the TCP server",
    lifespan=lifespan,
)

app.include_router(funkos.router, prefix="/api/funkos", tags=["funkos"])
