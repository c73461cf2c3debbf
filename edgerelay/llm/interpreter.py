"""Layered extraction of completion text from untrusted upstream responses.

Architectural role:
    Converts an `UpstreamResponse` into exactly one completion text. The upstream
    response shape is treated as untrusted: schema drift and malformed JSON degrade
    to coarser representations instead of raising.

Extraction policy (first match wins):
    1. Non-200 status            -> `FailedStatus`
    2. Body is not JSON          -> `RawBody`
    3. `result.response` string  -> `StructuredReply`
    4. `result` present          -> `PartialResult`
    5. Anything else             -> `FullPayload`

Determinism:
    Pure and total for any input; no I/O and no exceptions.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from edgerelay.llm.client import UpstreamResponse


@dataclass(frozen=True)
class FailedStatus:
    status_code: int
    body_text: str


@dataclass(frozen=True)
class StructuredReply:
    text: str


@dataclass(frozen=True)
class PartialResult:
    value: Any


@dataclass(frozen=True)
class FullPayload:
    value: Any


@dataclass(frozen=True)
class RawBody:
    text: str


UpstreamPayload = Union[FailedStatus, StructuredReply, PartialResult, FullPayload, RawBody]


def _compact_json(value: Any) -> str:
    """Serialize like `JSON.stringify`: no whitespace, non-ASCII kept as-is."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def classify(response: UpstreamResponse) -> UpstreamPayload:
    """Tag a raw upstream response with the most specific known shape."""
    if response.status_code != 200:
        return FailedStatus(response.status_code, response.body_text)

    try:
        data = json.loads(response.body_text)
    except (ValueError, RecursionError):
        return RawBody(response.body_text)

    if isinstance(data, dict) and "result" in data:
        result = data["result"]
        if isinstance(result, dict) and isinstance(result.get("response"), str):
            return StructuredReply(result["response"])
        return PartialResult(result)

    return FullPayload(data)


def render(payload: UpstreamPayload) -> str:
    """Map a classified payload to its completion text."""
    if isinstance(payload, FailedStatus):
        return f"API request failed with status {payload.status_code}: {payload.body_text}"
    if isinstance(payload, StructuredReply):
        return payload.text
    if isinstance(payload, PartialResult):
        return f"AI Response: {_compact_json(payload.value)}"
    if isinstance(payload, FullPayload):
        return f"Full API Response: {_compact_json(payload.value)}"
    if isinstance(payload, RawBody):
        return payload.text
    raise TypeError(f"Unknown upstream payload: {payload!r}")


def _utf8_safe(text: str) -> str:
    """Replace lone surrogates (valid JSON escapes such as `\\ud800`) so the text encodes."""
    return text.encode("utf-8", "replace").decode("utf-8")


def interpret(response: UpstreamResponse) -> str:
    """Return the completion text for `response` using the layered policy.

    Payloads too deeply nested to re-serialize degrade to the raw body.
    """
    payload = classify(response)
    try:
        text = render(payload)
    except RecursionError:
        text = render(RawBody(response.body_text))
    return _utf8_safe(text)
