import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.exceptions import InventoryError

logger = logging.getLogger(__name__)


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Map every InventoryError subclass to its declared HTTP status"""
    app.add_exception_handler(InventoryError, inventory_error_handler)
