"""Transport client for the upstream text-generation endpoint.

Architectural role:
    Builds and sends exactly one HTTP request per completion and returns the raw
    status code and buffered body text for `edgerelay.llm.interpreter`.

Model invocation flow:
    `core.relay.CompletionRelay.complete` -> `fetch_completion(credentials, prompt)`
    -> `build_request` -> `httpx.AsyncClient.post` -> `UpstreamResponse`.

Retry behavior:
    No retry loop is implemented. Each call is attempted once with the configured
    timeout (`RelayConfig.timeout_seconds`).

Failure handling model:
    - Non-success status codes are returned as data, not raised.
    - Transport faults (DNS, connect, protocol, timeout) raise
      `UpstreamTransportError` / `UpstreamTimeout` for the route layer to map.
"""

import logging
from dataclasses import dataclass, field

import httpx

from edgerelay.llm.credentials import Credentials
from edgerelay.llm.provider_config import RelayConfig


logger = logging.getLogger(__name__)


class UpstreamTransportError(Exception):
    """The upstream endpoint could not be reached or the exchange broke off."""


class UpstreamTimeout(UpstreamTransportError):
    """The upstream endpoint did not answer within the configured timeout."""


@dataclass(frozen=True)
class UpstreamRequest:
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body_text: str


def build_request(credentials: Credentials, prompt: str, config: RelayConfig) -> UpstreamRequest:
    """Build a fresh upstream request for one completion.

    Args:
        credentials: Resolved account id and API token.
        prompt: Prompt text placed in the JSON body.
        config: Relay configuration providing endpoint and model.

    Returns:
        Request with account-specific URL, bearer auth, and `{"prompt": ...}` body.
    """
    url = config.endpoint_template.replace("{account_id}", credentials.account_id)
    headers = {
        "Authorization": f"Bearer {credentials.api_token}",
        "Content-Type": "application/json",
    }
    return UpstreamRequest(url=url, headers=headers, body={"prompt": prompt})


async def _send(client: httpx.AsyncClient, request: UpstreamRequest, timeout: float) -> httpx.Response:
    try:
        return await client.post(
            request.url,
            headers=request.headers,
            json=request.body,
            timeout=timeout,
        )
    except httpx.TimeoutException as err:
        raise UpstreamTimeout(f"Upstream request timed out after {timeout}s") from err
    except httpx.RequestError as err:
        raise UpstreamTransportError(f"Upstream request failed: {type(err).__name__}") from err


async def fetch_completion(
    credentials: Credentials,
    prompt: str,
    config: RelayConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> UpstreamResponse:
    """Send one completion request and buffer the full response.

    Args:
        credentials: Resolved upstream credentials.
        prompt: Prompt forwarded to the model.
        config: Relay configuration (endpoint, model, timeout).
        client: Optional shared `httpx.AsyncClient`. When omitted, a client is
            opened and closed for this call only.

    Returns:
        `UpstreamResponse` with status code and decoded body text, whatever the
        status.

    Raises:
        UpstreamTimeout: When no answer arrives within `config.timeout_seconds`.
        UpstreamTransportError: For connection, DNS, or protocol failures.

    Cancellation:
        The call awaits cooperatively; cancelling the awaiting task aborts the
        in-flight request.
    """
    request = build_request(credentials, prompt, config)

    if client is not None:
        response = await _send(client, request, config.timeout_seconds)
    else:
        async with httpx.AsyncClient() as own_client:
            response = await _send(own_client, request, config.timeout_seconds)

    if response.status_code != 200:
        logger.warning("Upstream returned status %d for model %s", response.status_code, config.model)

    return UpstreamResponse(status_code=response.status_code, body_text=response.text)
