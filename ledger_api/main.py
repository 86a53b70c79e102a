import logging
from contextlib import asynccontextmanager
from datetime import datetime, UTC
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_api.config import settings
from ledger_api.core.exceptions import LedgerException
from ledger_api.core.logging_config import configure_logging
from ledger_api.database import engine, ping
from ledger_api.schemas.common_schemas import ErrorResponse
from ledger_api.routes import (
    app_routes,
    account_routes,
    payee_routes,
    category_routes,
    tag_routes,
    transaction_routes,
    report_routes,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    ping()
    app.state.ready = True
    logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
    yield
    app.state.ready = False
    engine.dispose()
    logger.info("%s shut down", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the error envelope shared by every handler"""
    body = ErrorResponse(
        status_code=status_code,
        message=message,
        error=HTTPStatus(status_code).phrase,
        timestamp=datetime.now(UTC),
        path=request.url.path,
        errors=errors,
    )
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {**(headers or {}), "WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


# Exception handlers
@app.exception_handler(LedgerException)
async def ledger_exception_handler(request: Request, exc: LedgerException):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"])
        errors.setdefault(field, []).append(error["msg"])

    logger.warning("%s %s -> 400: invalid request %s", request.method, request.url.path, list(errors))
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, "SCHEMA_VALIDATION_FAILED", errors=errors
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning("%s %s -> %s", request.method, request.url.path, exc.status_code)
    return error_response(request, exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include routers
app.include_router(app_routes.router, tags=["App"])
app.include_router(account_routes.router, prefix="/accounts", tags=["Accounts"])
app.include_router(payee_routes.router, prefix="/payees", tags=["Payees"])
app.include_router(category_routes.router, prefix="/categories", tags=["Categories"])
app.include_router(tag_routes.router, prefix="/tags", tags=["Tags"])
app.include_router(transaction_routes.router, prefix="/transactions", tags=["Transactions"])
app.include_router(report_routes.router, prefix="/reports", tags=["Reports"])
