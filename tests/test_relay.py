import asyncio
import json

import pytest

from edgerelay.core.framing import DONE_FRAME
from edgerelay.core.relay import EMPTY_RESPONSE_TEXT, CompletionRelay
from edgerelay.llm.client import UpstreamTransportError
from edgerelay.llm.provider_config import DEFAULT_PROMPT, RelayConfig


def run_relay(relay, prompt=None):
    async def run():
        async with relay.client:
            return await relay.complete(prompt)

    return asyncio.run(run())


def test_missing_account_id_short_circuits_before_network(spy_factory):
    spy = spy_factory(200, {"result": {"response": "hi"}})
    relay = CompletionRelay(RelayConfig(api_token="tok"), client=spy.client())

    assert run_relay(relay) == "Error: CLOUDFLARE_ACCOUNT_ID environment variable not set"
    assert spy.calls == 0


def test_missing_token_short_circuits_before_network(spy_factory):
    spy = spy_factory(200, {"result": {"response": "hi"}})
    relay = CompletionRelay(RelayConfig(account_id="acct"), client=spy.client())

    assert run_relay(relay) == "Error: CLOUDFLARE_API_TOKEN environment variable not set"
    assert spy.calls == 0


def test_default_prompt_is_used_when_none_given(config, spy_factory):
    spy = spy_factory(200, {"result": {"response": "It started at Bell Labs"}})
    relay = CompletionRelay(config, client=spy.client())

    assert run_relay(relay) == "It started at Bell Labs"
    assert json.loads(spy.requests[0].content) == {"prompt": DEFAULT_PROMPT}


def test_caller_prompt_overrides_default(config, spy_factory):
    spy = spy_factory(200, {"result": {"response": "ok"}})
    relay = CompletionRelay(config, client=spy.client())

    run_relay(relay, "  Tell me a joke ")
    assert json.loads(spy.requests[0].content) == {"prompt": "Tell me a joke"}


def test_blank_prompt_falls_back_to_default(config):
    assert CompletionRelay(config).select_prompt("   ") == DEFAULT_PROMPT


def test_upstream_failure_status_degrades_to_text(config, spy_factory):
    spy = spy_factory(500, "boom")
    relay = CompletionRelay(config, client=spy.client())

    assert run_relay(relay) == "API request failed with status 500: boom"


def test_empty_body_is_never_delivered_as_empty_text(config, spy_factory):
    spy = spy_factory(200, "")
    relay = CompletionRelay(config, client=spy.client())

    assert run_relay(relay) == EMPTY_RESPONSE_TEXT


def test_transport_error_propagates(config, spy_factory):
    import httpx

    spy = spy_factory(error=httpx.ConnectError("refused"))
    relay = CompletionRelay(config, client=spy.client())

    with pytest.raises(UpstreamTransportError):
        run_relay(relay)


def test_stream_returns_frames(config, spy_factory):
    spy = spy_factory(200, {"result": {"response": "a b c d"}})
    relay = CompletionRelay(config, client=spy.client())

    async def run():
        async with relay.client:
            return await relay.stream()

    assert asyncio.run(run()) == ["data: a b c\n\n", "data: d\n\n", DONE_FRAME]


def test_completion_is_logged_with_status_and_frame_count(config, spy_factory, caplog):
    import logging

    caplog.set_level(logging.INFO, logger="edgerelay.core.relay")
    spy = spy_factory(200, {"result": {"response": "a b c d"}})
    run_relay(CompletionRelay(config, client=spy.client()))

    assert "Relay completed: status=200 frames=3" in caplog.messages
