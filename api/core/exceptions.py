import uuid
from http import HTTPStatus

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from api.config.logging import add_request_context, get_logger

logger = get_logger(__name__)

PROBLEM_JSON = "application/problem+json"


class JobsAPIException(Exception):
    """Base exception for the Jobs API; rendered as a problem detail."""

    title = "Internal Server Error"

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        title: str | None = None,
    ):
        self.detail = detail
        self.status_code = status_code
        if title is not None:
            self.title = title
        super().__init__(self.detail)


class ValidationError(JobsAPIException):
    """Raised when a request is rejected before reaching storage."""

    title = "Validation Error"

    def __init__(self, detail: str, title: str | None = None):
        super().__init__(detail, 422, title)


class NotFoundError(JobsAPIException):
    """Raised when a resource is not found."""

    title = "Not Found"

    def __init__(self, detail: str, title: str | None = None):
        super().__init__(detail, status.HTTP_404_NOT_FOUND, title)


class StorageError(JobsAPIException):
    """Raised when the job store fails; the transaction has been rolled back."""

    def __init__(self, detail: str):
        super().__init__(detail, status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_problem_response(
    status_code: int,
    title: str,
    detail: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a problem-detail error response."""
    return JSONResponse(
        status_code=status_code,
        content={"title": title, "status": status_code, "detail": detail},
        media_type=PROBLEM_JSON,
        headers=headers,
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", str(uuid.uuid4()))


async def jobs_api_exception_handler(
    request: Request, exc: JobsAPIException
) -> JSONResponse:
    """Handle Jobs API specific exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application exception",
        exception=exc.__class__.__name__,
        title=exc.title,
        detail=exc.detail,
        status_code=exc.status_code,
        request_id=_request_id(request),
    )

    return create_problem_response(exc.status_code, exc.title, exc.detail)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as an invalid payload."""
    errors = exc.errors()

    logger.warning(
        "Request validation failed",
        errors=[{"loc": list(e.get("loc", ())), "type": e.get("type")} for e in errors],
        request_id=_request_id(request),
    )

    if any(e.get("loc", ())[:1] == ("body",) for e in errors):
        return create_problem_response(
            422,
            "Invalid Payload",
            "Payload must be a JSON object",
        )

    first = errors[0] if errors else {}
    return create_problem_response(
        422,
        "Invalid Request",
        str(first.get("msg", "Request validation failed")),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routing and handlers."""
    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=_request_id(request),
    )

    return create_problem_response(
        exc.status_code,
        _status_phrase(exc.status_code),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = _request_id(request)
    logger.error(
        "Unhandled exception",
        exception=exc.__class__.__name__,
        message=str(exc),
        request_id=request_id,
        exc_info=exc,
    )

    # Rendered by the outermost error middleware, after RequestContextMiddleware
    return create_problem_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        headers={"X-Request-ID": request_id},
    )


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to add request context and correlation IDs."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        add_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response
