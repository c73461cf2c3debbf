"""Event-stream framing of completed text.

The upstream call is fully buffered, so streaming here is synthetic: a complete
string is split into whitespace-delimited words, grouped into fixed-size runs,
and emitted as `data: <run>\n\n` frames followed by one `data: [DONE]\n\n`
sentinel. Consumers must treat `[DONE]` as end-of-stream, not as content.

`CompletionSource` keeps text production separate from framing so a source that
truly streams can replace the buffered relay without touching this module.
"""

from typing import Iterator, Protocol

from fastapi.responses import StreamingResponse


DONE_SENTINEL = "[DONE]"
DONE_FRAME = f"data: {DONE_SENTINEL}\n\n"
DEFAULT_WORDS_PER_FRAME = 3

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
}


class CompletionSource(Protocol):
    """Anything that can produce one complete completion text for a prompt."""

    async def complete(self, prompt: str | None = None) -> str:
        ...


def format_frame(payload: str) -> str:
    return f"data: {payload}\n\n"


def iter_frames(text: str, words_per_frame: int = DEFAULT_WORDS_PER_FRAME) -> Iterator[str]:
    """Yield content frames for `text` in word order, then the sentinel frame.

    Args:
        text: Completed text; may be empty.
        words_per_frame: Number of words joined into each content frame.

    Raises:
        ValueError: If `words_per_frame` is smaller than 1.
    """
    if words_per_frame < 1:
        raise ValueError("words_per_frame must be at least 1")

    words = text.split()
    for start in range(0, len(words), words_per_frame):
        yield format_frame(" ".join(words[start:start + words_per_frame]))

    yield DONE_FRAME


def count_frames(text: str, words_per_frame: int = DEFAULT_WORDS_PER_FRAME) -> int:
    """Number of frames `iter_frames` yields for `text`, sentinel included."""
    return -(-len(text.split()) // words_per_frame) + 1


def frame_text(text: str, words_per_frame: int = DEFAULT_WORDS_PER_FRAME) -> list[str]:
    """Return the full frame sequence for `text` (sentinel last)."""
    return list(iter_frames(text, words_per_frame))


def parse_frames(body: str) -> list[str]:
    """Read frame payloads from an event-stream body, stopping at the sentinel."""
    payloads = []
    for record in body.split("\n\n"):
        if not record.startswith("data: "):
            continue
        payload = record[len("data: "):]
        if payload == DONE_SENTINEL:
            break
        payloads.append(payload)
    return payloads


def event_stream_response(
    text: str,
    words_per_frame: int = DEFAULT_WORDS_PER_FRAME,
) -> StreamingResponse:
    """Wrap the frames of `text` in a 200 `text/event-stream` response."""
    return StreamingResponse(
        iter_frames(text, words_per_frame),
        status_code=200,
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
