import logging
import os
import time
import uuid
from typing import Any, Iterable, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("edgerelay.http")


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _get_request_id(scope: Scope) -> Optional[str]:
    headers: Iterable[Tuple[bytes, bytes]] = scope.get("headers") or []
    for k, v in headers:
        if k.lower() == b"x-request-id":
            return v.decode("latin-1", errors="replace")
    return None


class HttpLoggingMiddleware:
    """Log one line per HTTP request: id, method, path, status, duration.

    Bodies and headers are never captured, so bearer tokens cannot leak.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        request_id = _get_request_id(scope) or uuid.uuid4().hex[:12]
        status: Optional[int] = None

        async def send_wrapped(message: Message) -> None:
            nonlocal status
            if message.get("type") == "http.response.start":
                status = int(message.get("status") or 0)
            await send(message)

        err: Optional[BaseException] = None
        try:
            await self.app(scope, receive, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - log then re-raise
            err = e
            raise
        finally:
            dur_ms = int((time.perf_counter() - started_at) * 1000)
            method = str(scope.get("method") or "").upper()
            path = str(scope.get("path") or "")
            if err is not None:
                logger.info(
                    "%s %s %s status=%s dur_ms=%s error=%s",
                    request_id, method, path, status, dur_ms, type(err).__name__,
                )
            else:
                logger.info("%s %s %s status=%s dur_ms=%s", request_id, method, path, status, dur_ms)


def install_http_logging(app: Any) -> None:
    """
    Enable request logging via env vars.

    - `RELAY_HTTP_LOG=1` enables middleware
    """
    if not _env_bool("RELAY_HTTP_LOG", default=False):
        return
    app.add_middleware(HttpLoggingMiddleware)
