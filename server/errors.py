"""
Error handling for the API.

Every error response uses the envelope {"error": str, "status": int}. In
development, 500 responses also carry the stack trace under "stack".
"""

import traceback
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from logic.config import is_development
from observability import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """A database operation failed; answered with a generic 500."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@contextmanager
def store_errors(db, message: str):
    """Translate SQLAlchemy failures inside the block into StoreError.

    The session is rolled back before the StoreError is raised. Other
    exceptions, HTTPException included, pass through untouched.

    Args:
        db: Session used inside the block.
        message: Client-facing error message.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("store_error", message=message, error=str(exc), exc_info=True)
        raise StoreError(message) from exc


def error_body(message: str, status: int, exc: Exception = None) -> dict:
    body = {"error": message, "status": status}
    if exc is not None and status >= 500 and is_development():
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Starlette raises a bare "Not Found" when no route matches.
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": f"Cannot {request.method} {request.url.path}",
                "status": 404,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})

    message = "; ".join(
        f"{d['field']}: {d['message']}" if d["field"] else d["message"] for d in details
    )
    body = error_body(message or "Invalid request", 400)
    body["details"] = details
    return JSONResponse(status_code=400, content=body)


async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=500, content=error_body(exc.message, 500, exc))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", 500, exc))


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
