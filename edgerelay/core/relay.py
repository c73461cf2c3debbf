"""Completion relay orchestration.

Architectural role:
    Provides the single pipeline used by API/CLI layers to turn one prompt into one
    completion text: credential resolution -> upstream fetch -> interpretation.

Control-flow model:
    1. Resolve credentials from the injected `RelayConfig`; a missing key
       short-circuits to its degradation message before any network call.
    2. Choose the caller prompt, or the configured default prompt.
    3. Await the upstream call (the only suspension point).
    4. Interpret the buffered response with the layered extraction policy.

Error handling strategy:
    Missing credentials, non-success statuses, and unparsable bodies all degrade to
    non-empty completion text. Transport faults (`UpstreamTransportError`) are not
    recovered here and propagate to the route layer.

Side effects:
    One outbound HTTP request per completion; log records only. No state is kept
    between calls.
"""

import logging

import httpx

from edgerelay.core.framing import count_frames, frame_text
from edgerelay.llm.client import fetch_completion
from edgerelay.llm.credentials import Credentials, MissingCredential, resolve_credentials
from edgerelay.llm.interpreter import interpret
from edgerelay.llm.provider_config import RelayConfig


logger = logging.getLogger(__name__)

EMPTY_RESPONSE_TEXT = "Empty response from API"


async def complete_text(
    credentials: Credentials,
    prompt: str,
    config: RelayConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Fetch and interpret one completion for already-resolved credentials.

    Raises:
        UpstreamTransportError: Propagated from the transport client.
    """
    response = await fetch_completion(credentials, prompt, config, client=client)
    text = interpret(response)
    if not text.strip():
        logger.warning("Upstream produced empty completion text (status=%d)", response.status_code)
        text = EMPTY_RESPONSE_TEXT
    logger.info(
        "Relay completed: status=%d frames=%d",
        response.status_code,
        count_frames(text, config.words_per_frame),
    )
    return text


class CompletionRelay:
    """Request-scoped completion pipeline bound to one configuration.

    The relay holds only immutable configuration and an optional shared
    `httpx.AsyncClient`; every call resolves its own credentials and response.
    """

    def __init__(self, config: RelayConfig, *, client: httpx.AsyncClient | None = None):
        self.config = config
        self.client = client

    def select_prompt(self, prompt: str | None) -> str:
        if prompt and prompt.strip():
            return prompt.strip()
        return self.config.default_prompt

    async def complete(self, prompt: str | None = None) -> str:
        """Return the completion text for `prompt` (or the default prompt).

        Returns:
            Non-empty completion text: the model reply, a serialized fallback, or a
            degradation message.

        Raises:
            UpstreamTransportError: When the upstream cannot be reached in time.
        """
        try:
            credentials = resolve_credentials(self.config)
        except MissingCredential as err:
            logger.warning("Relay skipped upstream call: %s not configured", err.key)
            return err.message

        text = await complete_text(
            credentials,
            self.select_prompt(prompt),
            self.config,
            client=self.client,
        )
        return text

    async def stream(self, prompt: str | None = None) -> list[str]:
        """Return the event-stream frames for one completion."""
        text = await self.complete(prompt)
        return frame_text(text, self.config.words_per_frame)
