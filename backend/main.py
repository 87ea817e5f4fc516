from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from core.config import settings
from core.error_handlers import register_exception_handlers
from core.locks import KeyedLocks
from core.logging_config import configure_logging
from db.database import create_db_and_tables
from db.item_store import InMemoryItemStore
from routers.inventory import router as inventory_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.inventory_store == "memory":
        logger.info("Using in-memory item store")
        app.state.item_store = InMemoryItemStore()
    else:
        await create_db_and_tables()
    yield


app = FastAPI(
    title="Inventory Service API",
    description="API for managing inventory items and stock levels",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Per-item locks shared by every request handled by this process
app.state.item_locks = KeyedLocks()

register_exception_handlers(app)

app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["inventory"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
