"""Exception handlers that keep error bodies generic."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_REQUEST_DETAIL = "Invalid request."


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body validation failures as 400 without field-level detail."""
    logger.debug("Request validation failed on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_REQUEST_DETAIL},
    )
