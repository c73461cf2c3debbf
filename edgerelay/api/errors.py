"""Generic JSON error translation for the HTTP adapter.

Every error response produced by the app has the shape
`{"error": <short label>, "message": <description>, "status": <code>}`.
Upstream transport faults are mapped to gateway statuses (502/504); request
validation failures are reported as 400.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from edgerelay.llm.client import UpstreamTimeout, UpstreamTransportError


logger = logging.getLogger(__name__)

ERROR_LABELS = {
    400: ("Bad Request", "The request was invalid"),
    404: ("Not Found", "The requested resource was not found"),
    500: ("Internal Server Error", "An unexpected error occurred"),
    502: ("Bad Gateway", "The upstream service could not be reached"),
    504: ("Gateway Timeout", "The upstream service did not respond in time"),
}
DEFAULT_LABEL = ("Error", "An error occurred")


def error_body(status_code: int) -> dict:
    label, description = ERROR_LABELS.get(status_code, DEFAULT_LABEL)
    return {"error": label, "message": description, "status": status_code}


def error_response(status_code: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(status_code), headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    """Register the generic error translator on `app`."""

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("400 validation_error path=%s errors=%s", request.url.path, exc.errors())
        return error_response(400)

    @app.exception_handler(UpstreamTransportError)
    async def _upstream_error_handler(request: Request, exc: UpstreamTransportError) -> JSONResponse:
        status_code = 504 if isinstance(exc, UpstreamTimeout) else 502
        logger.warning("%d upstream_error path=%s err=%s", status_code, request.url.path, exc)
        return error_response(status_code)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("500 internal_error path=%s", request.url.path)
        return error_response(500)
