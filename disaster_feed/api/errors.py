"""
Error envelope: every handled failure is rendered as ``{error, message}``.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"


class APIError(Exception):
    """An error surfaced to the client with a fixed status and envelope."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str = GENERIC_MESSAGE,
    ) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


def internal_error(operation: str) -> APIError:
    """A 500 for ``operation`` with a message that leaks nothing."""
    return APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, f"{operation} failed")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", path=request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": GENERIC_MESSAGE},
        )
