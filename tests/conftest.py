from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from edgerelay.llm.provider_config import RelayConfig  # noqa: E402


class UpstreamSpy:
    """Records upstream requests and answers them with a canned response."""

    def __init__(self, status_code: int = 200, body: str | dict = "", error: Exception | None = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, dict):
            return httpx.Response(self.status_code, text=json.dumps(self.body))
        return httpx.Response(self.status_code, text=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(account_id="acct-123", api_token="tok-secret")


@pytest.fixture
def spy_factory():
    return UpstreamSpy
