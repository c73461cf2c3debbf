"""
HTTP API adapter for the edgerelay completion relay.

Architectural role:
- Expose the relay as event-stream and JSON HTTP routes.
- Own CORS, request logging, and generic error translation.
- Delegate completion work to `edgerelay.core.relay.CompletionRelay`.

Endpoint responsibilities:
- `GET /ai`, `POST /ai`: relay one completion as a `text/event-stream` body.
- `GET /ai/json`: relay one completion as a `{status, message}` JSON envelope.
- `GET /`: synthetic chunked demo stream.
- `GET /hello/{name}`: plain-text greeting.
- `GET /health`: liveness probe.

API request lifecycle (`GET /ai`):
1. Read the optional `prompt` query parameter (default prompt otherwise).
2. Await `CompletionRelay.complete` (credential -> upstream -> interpretation).
3. Frame the completion text into 3-word `data:` frames plus `data: [DONE]`.

Error handling strategy:
- Missing credentials, non-200 upstream statuses, and malformed upstream bodies are
  delivered as stream content with HTTP 200.
- Upstream transport faults map to 502 (unreachable) or 504 (timeout) JSON errors.
- Unknown routes and invalid requests map to 404 / 400 JSON errors.

Side effects:
- Loads environment variables at import time via `load_config()` for the default
  module-level `app`, which any separately installed ASGI server can serve.
- Emits debug logs only when `DEBUG == "true"`.
"""

import logging
import os

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel

from edgerelay.api.errors import install_error_handlers
from edgerelay.api.http_logging import install_http_logging
from edgerelay.core.framing import CompletionSource, event_stream_response
from edgerelay.core.relay import CompletionRelay
from edgerelay.llm.provider_config import RelayConfig, load_config


logger = logging.getLogger(__name__)
# Verbose request handling logs are opt-in.
DEBUG = os.getenv("DEBUG") == "true"
if DEBUG:
    logger.setLevel(logging.DEBUG)

DEMO_CHUNK_COUNT = 6


# ============================================================
# Request Schema
# ============================================================

class CompletionRequest(BaseModel):
    """Optional JSON body for `POST /ai`."""

    prompt: str | None = None


# ============================================================
# App Factory
# ============================================================

def create_app(config: RelayConfig | None = None, *, client: httpx.AsyncClient | None = None) -> FastAPI:
    """
    Build the FastAPI app around one relay configuration.

    Args:
    - config: Relay configuration; resolved from the environment when omitted.
    - client: Optional shared `httpx.AsyncClient` for upstream calls.
    """
    if config is None:
        config = load_config()

    relay: CompletionSource = CompletionRelay(config, client=client)

    app = FastAPI(title="edgerelay")
    app.state.relay = relay

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_http_logging(app)
    install_error_handlers(app)

    # ============================================================
    # Completion Relay
    # ============================================================

    async def _relay_stream(prompt: str | None) -> StreamingResponse:
        text = await relay.complete(prompt)
        logger.debug("Completion text: %r", text)
        return event_stream_response(text, config.words_per_frame)

    @app.get("/ai")
    async def ai_stream(prompt: str | None = None):
        """Relay one completion as a synthetic event stream."""
        logger.debug("GET /ai prompt=%r", prompt)
        return await _relay_stream(prompt)

    @app.post("/ai")
    async def ai_stream_post(body: CompletionRequest | None = None):
        """Relay one completion for a prompt supplied in the JSON body."""
        prompt = body.prompt if body is not None else None
        logger.debug("POST /ai prompt=%r", prompt)
        return await _relay_stream(prompt)

    @app.get("/ai/json")
    async def ai_json(prompt: str | None = None):
        """
        Non-streaming relay variant.

        Response formatting:
        - `{"status": 200, "message": <completion text>}`
        """
        text = await relay.complete(prompt)
        return {"status": 200, "message": text}

    # ============================================================
    # Edge Routes
    # ============================================================

    @app.get("/")
    async def demo_stream():
        """Stream `Chunk 0` .. `Chunk 5`, one line per chunk."""

        def chunks():
            for i in range(DEMO_CHUNK_COUNT):
                yield f"Chunk {i}\n"

        return StreamingResponse(chunks(), media_type="text/plain")

    @app.get("/hello/{name}")
    async def greet(name: str):
        return PlainTextResponse(f"Hello {name}!")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
