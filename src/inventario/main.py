import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tortoise import Tortoise
from tortoise.exceptions import DBConnectionError, DoesNotExist, IntegrityError

from .core import config
from .core.logging_config import setup_logging
from .common.exceptions import (
    ConflictError,
    InternalError,
    InventoryError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from .common.schemas import ErrorResponse
from .features.categories.router import router as categories_router
from .features.catalogs.router import router as catalogs_router
from .features.elements.router import router as elements_router
from .features.elements.router import serials_router
from .features.lots.router import router as lots_router
from .features.lots.router import movements_router
from .features.reports.router import router as reports_router

setup_logging()
logger = logging.getLogger("inventario.main")  # This logger will inherit from 'inventario'


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events, such as connecting to the database.
    """
    logger.info("Starting application...")
    await Tortoise.init(config=config.TORTOISE_ORM)
    logger.info("Tortoise-ORM has been initialized.")

    yield

    await Tortoise.close_connections()
    logger.info("Tortoise-ORM connections have been closed.")


def _failure(error: InventoryError, exc: Exception = None) -> JSONResponse:
    """Renders ``error`` as a failure envelope; ``exc`` is the exception actually caught."""
    body = ErrorResponse(
        error=error.message,
        detalle=type(exc).__name__ if config.DEBUG_MODE and exc is not None else None,
    )
    return JSONResponse(status_code=error.status_code, content=body.model_dump(exclude_none=True))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    if isinstance(exc, InventoryError):
        return _failure(exc, exc)
    error = InventoryError(str(exc.detail))
    error.status_code = exc.status_code
    return _failure(error, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg", ""))
    return _failure(ValidationError("; ".join(messages) or None), exc)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error(f"Integrity error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return _failure(ConflictError("El registro entra en conflicto con datos existentes"), exc)


async def db_connection_error_handler(request: Request, exc: DBConnectionError) -> JSONResponse:
    logger.error(f"Database unavailable: {exc}", exc_info=True)
    return _failure(UnavailableError(), exc)


async def does_not_exist_handler(request: Request, exc: DoesNotExist) -> JSONResponse:
    return _failure(NotFoundError(), exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return _failure(InternalError(), exc)


app = FastAPI(
    title="Inventario API",
    description="API for managing the inventory of rental equipment: categories, elements, serials and lots.",
    version="0.1.0",
    exception_handlers={
        StarletteHTTPException: http_exception_handler,
        RequestValidationError: validation_exception_handler,
        IntegrityError: integrity_error_handler,
        DBConnectionError: db_connection_error_handler,
        DoesNotExist: does_not_exist_handler,
        Exception: unhandled_exception_handler,
    },
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def read_root(request: Request):
    """
    Root endpoint for the API.
    """
    client_host = request.client.host if request.client else "unknown client"
    logger.info(f"Root endpoint '/' accessed by {client_host}")
    return {"message": "Bienvenido a la API de Inventario", "docs": "/docs"}


# Include your routers
app.include_router(categories_router, prefix=config.API_PREFIX)
app.include_router(catalogs_router, prefix=config.API_PREFIX)
app.include_router(elements_router, prefix=config.API_PREFIX)
app.include_router(serials_router, prefix=config.API_PREFIX)
app.include_router(lots_router, prefix=config.API_PREFIX)
app.include_router(movements_router, prefix=config.API_PREFIX)
app.include_router(reports_router, prefix=config.API_PREFIX)
