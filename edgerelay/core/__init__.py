"""Core relay package.

Architectural role:
    Exposes the completion-relay layer that sits between API/CLI entrypoints and the
    upstream access package (`edgerelay.llm`).

Composition:
    - `relay`: credential -> fetch -> interpret pipeline producing completion text.
    - `framing`: synthetic event-stream chunking of completed text.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Network I/O happens
    only inside `relay` during request processing.
"""
