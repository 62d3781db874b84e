"""Exception handlers that render the error taxonomy as JSON."""

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pixelboard.errors import PixelBoardError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI, environment: str) -> None:
    """Register handlers for application, validation and transport errors."""

    @app.exception_handler(PixelBoardError)
    async def pixelboard_error_handler(
        request: Request, exc: PixelBoardError
    ) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "Request failed: %s",
                exc.message,
                extra={"path": request.url.path, "details": exc.details},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "details": exc.details},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "details": {"errors": errors}},
        )

    @app.exception_handler(httpx.TransportError)
    async def transport_error_handler(
        request: Request, exc: httpx.TransportError
    ) -> JSONResponse:
        logger.exception(
            "Upstream service unreachable", extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=503,
            content={"message": "Upstream service unavailable", "details": {}},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception("Unhandled exception", extra={"path": request.url.path})
        details: dict[str, object] = {}
        if environment == "local":
            details = {"error": str(exc), "error_type": type(exc).__name__}
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "details": details},
        )
