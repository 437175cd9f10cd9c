"""Maps commerce errors onto HTTP responses.

Each error category has exactly one status code, so every adapter reports
the same failure the same way.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commerce.errors import (
    CommerceError,
    Conflict,
    InsufficientStock,
    InvalidArgument,
    InvalidState,
    NotFound,
)

logger = structlog.get_logger(__name__)

STATUS_BY_CATEGORY = {
    NotFound: 404,
    Conflict: 409,
    InvalidState: 409,
    InsufficientStock: 422,
    InvalidArgument: 400,
}


def status_for(exc: CommerceError) -> int:
    for category, status_code in STATUS_BY_CATEGORY.items():
        if isinstance(exc, category):
            return status_code
    return 400


def register_commerce_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CommerceError)
    async def handle_commerce_error(request: Request, exc: CommerceError) -> JSONResponse:
        status_code = status_for(exc)
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})
