"""HTTP mapping for checkout errors.

Protean's own ValidationError / ObjectNotFoundError are mapped by
`register_exception_handlers`; the checkout taxonomy and request validation
are mapped here. Every error body has the shape {"error": "..."}.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from checkout.errors import CheckoutError, InternalError
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


async def checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error=exc.message,
            error_type=type(exc).__name__,
            **exc.details,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_detail})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": problems})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": InternalError.public_message})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(CheckoutError, checkout_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
