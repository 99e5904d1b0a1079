import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.db import init_db
from app.errors import AppError, InternalError
from routers import admin_bookings, bookings, function_types

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Venue Booking API", version="0.1.0")

app.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
app.include_router(function_types.router, prefix="/function-types", tags=["function-types"])
app.include_router(admin_bookings.router, prefix="/admin/bookings", tags=["admin"])
app.include_router(function_types.admin_router, prefix="/admin/function-types", tags=["admin"])


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "kind": "VALIDATION_ERROR",
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "details": jsonable_encoder(exc.errors()),
            }
        },
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={
            "error": {
                "kind": "CONFLICT",
                "code": "DUPLICATE_ENTRY",
                "message": "A record with this value already exists",
            }
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("An unexpected error occurred")
    return JSONResponse(status_code=error.status_code, content={"error": error.to_dict()})


@app.on_event("startup")
def on_startup():
    if os.getenv("SKIP_DB_INIT") == "1":
        return
    init_db()


@app.get("/")
def root():
    return {"ok": True, "service": "venue-booking-api"}
