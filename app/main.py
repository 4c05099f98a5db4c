import asyncio
import logging

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

import app.models.registry  # noqa: F401
from app.api.v1.api_router import api_router
from app.core.config import settings
from app.core.exceptions import ReminderRunError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tuition Tracker API",
    description="Monthly tuition payment tracking for classes, with scheduled SMS reminders to parents",
    version="1.0.0",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")

from app.core.startup import ensure_default_admin, ensure_tables


@app.on_event("startup")
async def startup_event():
    """Prepare the schema and admin account, then start the daily reminder task."""
    await ensure_tables()
    await ensure_default_admin()
    if not settings.REMINDER_CRON_ENABLED:
        logger.info("Reminder cron disabled (REMINDER_CRON_ENABLED=false)")
        return
    from app.core.cron_runner import run_payment_reminder_cron_loop
    app.state.payment_reminder_cron_task = asyncio.create_task(run_payment_reminder_cron_loop())


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the reminder task; a sweep in progress is cancelled with it."""
    task = getattr(app.state, "payment_reminder_cron_task", None)
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        logger.info("Reminder cron stopped")


def _error_details(errors: list) -> list:
    """Validation errors as plain JSON (ctx values may hold exception objects)."""
    details = []
    for error in errors:
        item = {"type": error.get("type"), "loc": error.get("loc"), "msg": error.get("msg")}
        if error.get("ctx"):
            item["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        details.append(item)
    return details


async def _validation_error_response(request: Request, exc: ValidationError | RequestValidationError):
    errors = _error_details(exc.errors())
    logger.info("422 on %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation error", "errors": errors},
    )


app.add_exception_handler(RequestValidationError, _validation_error_response)
app.add_exception_handler(ValidationError, _validation_error_response)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(ReminderRunError)
async def reminder_run_error_handler(request: Request, exc: ReminderRunError):
    logger.error("Reminder run failed: method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"message": "Reminder run failed: payment records could not be loaded"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "Internal server error"})
