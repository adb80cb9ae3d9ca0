from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import GarageError, StorageError
from app.core.logging import configure_logging
from app.routers.auth import router as auth_router
from app.routers.billing import router as billing_router
from app.routers.bookings import router as bookings_router
from app.routers.inventory import router as inventory_router
from app.routers.job_cards import router as job_cards_router
from app.routers.staff import router as staff_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="Garage Desk",
    lifespan=lifespan,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(GarageError)
async def handle_garage_error(request: Request, exc: GarageError):
    if exc.status_code >= 500:
        logger.error("Request failed", extra={"path": request.url.path, "error": exc.message})
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid value")
    return _error(400, f"{field}: {message}" if field else message)


@app.exception_handler(SQLAlchemyError)
async def handle_storage_error(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Storage failure",
        extra={"path": request.url.path},
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error(500, StorageError().message)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal Server Error"})


app.include_router(auth_router)
app.include_router(bookings_router)
app.include_router(job_cards_router)
app.include_router(inventory_router)
app.include_router(billing_router)
app.include_router(staff_router)


@app.get("/")
def root():
    return {"status": "Garage Desk running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }
