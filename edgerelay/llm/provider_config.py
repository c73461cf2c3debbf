"""Provider/runtime configuration for the relay.

Architectural role:
    Centralizes endpoint selection, model routing, and credential values for
    `edgerelay.llm.credentials` and `edgerelay.llm.client`.

Model call flow integration:
    - `credentials.resolve_credentials` consumes `account_id` and `api_token`.
    - `client.build_request` consumes `api_base` and `model`.
    - `core.relay.CompletionRelay` consumes `default_prompt` and framing size.

Determinism:
    Deterministic for a fixed process environment (or injected mapping). Values are
    resolved once by `load_config` and carried as an immutable `RelayConfig`.

Failure behavior:
    Missing credentials are represented as `None` and reported by the credential
    resolver as descriptive strings, never as startup failures.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

# Environment keys for upstream credentials.
ACCOUNT_ID_KEY = "CLOUDFLARE_ACCOUNT_ID"
API_TOKEN_KEY = "CLOUDFLARE_API_TOKEN"

DEFAULT_API_BASE = "https://api.cloudflare.com/client/v4"
DEFAULT_MODEL = "@cf/meta/llama-3.1-8b-instruct"
DEFAULT_PROMPT = "Where did the phrase Hello World come from"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_WORDS_PER_FRAME = 3

# Relative to `api_base`; `{account_id}` and `{model}` are substituted per request.
RUN_PATH_TEMPLATE = "/accounts/{account_id}/ai/run/{model}"


@dataclass(frozen=True)
class RelayConfig:
    """Immutable relay settings passed into the relay and HTTP app at construction.

    Attributes:
        account_id: Upstream account identifier, `None` when not configured.
        api_token: Upstream bearer token, `None` when not configured.
        model: Text-generation model identifier appended to the run path.
        api_base: Upstream API root without trailing slash.
        default_prompt: Prompt used when the caller supplies none.
        timeout_seconds: Hard limit for one upstream call.
        words_per_frame: Word-group size used by event-stream framing.
    """

    account_id: str | None = None
    api_token: str | None = None
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    default_prompt: str = DEFAULT_PROMPT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    words_per_frame: int = DEFAULT_WORDS_PER_FRAME

    @property
    def endpoint_template(self) -> str:
        """Full endpoint URL template with `{account_id}` left open."""
        return self.api_base.rstrip("/") + RUN_PATH_TEMPLATE.replace("{model}", self.model)


def _clean(value: str | None) -> str | None:
    """Normalize blank configuration values to `None`."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid RELAY_TIMEOUT_SECONDS=%r", raw)
        return DEFAULT_TIMEOUT_SECONDS
    if timeout <= 0:
        logger.warning("Ignoring non-positive RELAY_TIMEOUT_SECONDS=%r", raw)
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


def load_config(environ: Mapping[str, str] | None = None) -> RelayConfig:
    """Build a `RelayConfig` from environment values.

    Resolution order:
        1. Injected `environ` mapping when provided (tests, embedding hosts).
        2. Process environment, after loading an optional `.env` file.

    Args:
        environ: Optional mapping used instead of `os.environ`.

    Returns:
        Resolved immutable configuration.

    Edge cases:
        - Empty or whitespace-only values count as absent.
        - Invalid timeouts fall back to the default with a warning.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return RelayConfig(
        account_id=_clean(environ.get(ACCOUNT_ID_KEY)),
        api_token=_clean(environ.get(API_TOKEN_KEY)),
        model=_clean(environ.get("RELAY_MODEL")) or DEFAULT_MODEL,
        api_base=_clean(environ.get("RELAY_API_BASE")) or DEFAULT_API_BASE,
        default_prompt=_clean(environ.get("RELAY_DEFAULT_PROMPT")) or DEFAULT_PROMPT,
        timeout_seconds=_parse_timeout(_clean(environ.get("RELAY_TIMEOUT_SECONDS"))),
    )
