"""
Request tracking, security headers and error rendering.
"""
import time

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from common.exceptions import BaseAPIException
from common.logging import (
    RequestContextLogger,
    get_logger,
    log_api_request,
    log_security_event,
)
from common.responses import create_error_response, create_validation_error_response
from config.config import settings

REQUEST_ID_HEADER = "X-Request-Id"

SUSPICIOUS_PATH_PATTERNS = ("../", "..\\", "<script", "javascript:", "vbscript:", "onerror=", "document.cookie")

API_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline';",
}

# Swagger UI pulls its bundle from a CDN and must be frameable by itself
DOCS_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

logger = get_logger("middleware")


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the logging context and echoes it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        incoming_id = request.headers.get(REQUEST_ID_HEADER)

        with RequestContextLogger(request_id=incoming_id, path=request.url.path) as ctx:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = ctx.request_id
            log_api_request(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
            )
        return response


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):
    """Turns exceptions no handler claimed into a 500 with the standard error body."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled {type(e).__name__} on {request.method} {request.url.path}",
                extra={"error_type": type(e).__name__, "method": request.method},
                exc_info=True
            )
            return create_error_response(
                error_code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred",
                status_code=500
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Flags suspicious paths and sets security headers; docs pages get a looser set."""

    def __init__(self, app):
        super().__init__(app)
        self.docs_paths = (settings.api_docs.docs_url, settings.api_docs.url)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        lowered = path.lower()
        matched = next((p for p in SUSPICIOUS_PATH_PATTERNS if p in lowered), None)
        if matched:
            log_security_event(
                event_type="suspicious_path",
                ip_address=request.client.host if request.client else None,
                details={"path": path, "pattern": matched}
            )

        response = await call_next(request)
        headers = DOCS_SECURITY_HEADERS if path.startswith(self.docs_paths) else API_SECURITY_HEADERS
        response.headers.update(headers)
        return response


def handle_api_exception(error: BaseAPIException, request: Request) -> JSONResponse:
    """Render an application exception as the standard error body."""
    log = logger.warning if error.status_code < 500 else logger.error
    log(
        f"{error.error_code}: {error.detail}",
        extra={
            "error_code": error.error_code,
            "status_code": error.status_code,
            "context": error.context,
            "method": request.method
        }
    )
    return create_error_response(
        error_code=error.error_code,
        message=error.detail,
        status_code=error.status_code,
        context=error.context,
        headers=error.headers
    )


def handle_request_validation_error(error: RequestValidationError, request: Request) -> JSONResponse:
    """FastAPI body/query validation failures, in the same envelope as other errors."""
    validation_errors = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]
    logger.warning(
        f"Request validation failed on {request.method} {request.url.path}",
        extra={"error_count": len(validation_errors)}
    )
    return create_validation_error_response(validation_errors)


def setup_middleware(app: FastAPI) -> None:
    """Register exception handlers and middleware; the last middleware added runs first."""

    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        return handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return handle_request_validation_error(exc, request)

    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestTrackingMiddleware)
