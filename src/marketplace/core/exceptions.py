"""Domain failure kinds and the handlers that translate them to HTTP responses.

Services raise these; only the exception handlers below decide on status codes.
"""

from typing import ClassVar

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


class MarketplaceError(Exception):
    """Base class for every failure the core can report.

    Attributes:
        kind: Failure kind (unauthorized, forbidden, not_found, ...).
        code: Machine-readable reason, e.g. "TokenExpired" or "ProjectNotOpen".
        message: Human-readable detail.
    """

    kind: ClassVar[str] = "error"
    status_code: ClassVar[int] = 500
    default_code: ClassVar[str] = "Error"

    def __init__(self, code: str | None = None, message: str | None = None):
        self.code = code or self.default_code
        self.message = message or self.code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class UnauthorizedError(MarketplaceError):
    """Missing, invalid or expired credential, or the subject no longer exists."""

    kind = "unauthorized"
    status_code = 401
    default_code = "Unauthorized"


class ForbiddenError(MarketplaceError):
    """Authenticated, but not allowed to perform this action."""

    kind = "forbidden"
    status_code = 403
    default_code = "Forbidden"


class NotFoundError(MarketplaceError):
    kind = "not_found"
    status_code = 404
    default_code = "NotFound"


class InvalidStateError(MarketplaceError):
    """Entity exists but its current state does not permit the transition."""

    kind = "invalid_state"
    status_code = 400
    default_code = "InvalidState"


class ConflictError(MarketplaceError):
    """A uniqueness or business invariant would be violated."""

    kind = "conflict"
    status_code = 400
    default_code = "Conflict"


class PersistenceFailureError(MarketplaceError):
    """The database could not complete the operation. Never retried here."""

    kind = "persistence_failure"
    status_code = 503
    default_code = "PersistenceFailure"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(
        request: Request, exc: MarketplaceError
    ) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, PersistenceFailureError):
            logger.error(
                "Persistence failure",
                request_id=request_id,
                path=request.url.path,
                error=exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "kind": exc.kind,
                "code": exc.code,
                "request_id": request_id,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
