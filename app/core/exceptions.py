"""API error hierarchy and the handlers that render it."""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class ApiError(HTTPException):
    """Base class for errors surfaced to API callers."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code_default, detail=detail, headers=headers)


class UnauthenticatedError(ApiError):
    """No credential was supplied, or it could not be trusted."""

    status_code_default = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class MalformedCredentialError(ApiError):
    """A bearer token was supplied but its claims could not be decoded."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    code = "malformed_credential"

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(detail)


class ForbiddenError(ApiError):
    """The caller's role is not allowed to perform the operation."""

    status_code_default = status.HTTP_403_FORBIDDEN
    code = "forbidden"

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(detail)


class NotFoundError(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(ApiError):
    status_code_default = status.HTTP_409_CONFLICT
    code = "conflict"


class ValidationFailedError(ApiError):
    """Bad or missing numeric or enum input."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    code = "validation_failed"

    def __init__(self, detail: str, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field


class UploadFailedError(ApiError):
    status_code_default = status.HTTP_502_BAD_GATEWAY
    code = "upload_failed"


class ExternalServiceError(ApiError):
    status_code_default = status.HTTP_502_BAD_GATEWAY
    code = "external_service_failure"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as a JSON body with its error code."""
    body: dict[str, str] = {"detail": exc.detail, "error": exc.code}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for errors that escaped the service layer."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the API error handlers to an application."""
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
