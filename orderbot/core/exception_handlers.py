import uuid
import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from orderbot.core.exceptions import OrderBotError

log = logging.getLogger(__name__)


def _rid():
    """Generates a unique request ID for tracing."""
    return uuid.uuid4().hex


def _error_body(code, message, **extra):
    error = {"code": code, "message": message}
    error.update(extra)
    return {"success": False, "error": error, "request_id": _rid()}


# ----------- Exception Handlers (called by FastAPI) -----------

def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 404, 502)."""
    return JSONResponse(status_code=exc.status_code, content=_error_body("http_error", exc.detail))


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles malformed webhook/API bodies (422 Unprocessable Entity)."""
    log.warning(f"Rejected invalid body on {request.url.path}")
    body = _error_body("validation_error", "Invalid input data", details=exc.errors())
    return JSONResponse(status_code=422, content=jsonable_encoder(body))


def collaborator_exception_handler(request: Request, exc: OrderBotError):
    """Ledger / speech / LINE failures that escaped a route (502 Bad Gateway)."""
    log.error(f"Upstream failure on path {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content=_error_body("upstream_error", str(exc)))


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    log.exception(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("server_error", "Internal Server Error"))


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(OrderBotError, collaborator_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    return app
