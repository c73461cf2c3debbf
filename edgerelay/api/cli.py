"""
Terminal entrypoint for the completion relay.

Architectural role:
- Provides a terminal-only interface over the core relay, without an HTTP server.
- Delegates completion work to `edgerelay.core.relay.CompletionRelay`.

Request lifecycle (one invocation):
1. Parse arguments (`--prompt`, `--raw`).
2. Resolve configuration from the environment (`.env` supported).
3. Run one completion via `asyncio.run`.
4. Print either the plain completion text or the raw event-stream frames.

Error handling strategy:
- Missing credentials and upstream status failures print their degradation text.
- Upstream transport failures print a one-line error and exit with status 1.
- Keyboard interrupts exit without traceback output.
"""

import argparse
import asyncio
import logging
import sys

from edgerelay.core.framing import frame_text
from edgerelay.core.relay import CompletionRelay
from edgerelay.llm.client import UpstreamTransportError
from edgerelay.llm.provider_config import load_config


# =========================================================
# UTF-8 SAFE STDOUT
# Configures best-effort UTF-8 console output without failing startup.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except (OSError, ValueError):
        pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="edgerelay", description="Relay one completion to the terminal.")
    parser.add_argument("--prompt", default=None, help="Prompt to send (defaults to the configured prompt)")
    parser.add_argument("--raw", action="store_true", help="Print event-stream frames instead of plain text")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")
    return parser


# =========================================================
# MAIN
# =========================================================

def main(argv=None) -> int:
    """
    Run one completion and render it to stdout.

    Returns:
    - 0 on any delivered completion text (including degradation messages).
    - 1 on upstream transport failure.
    - 130 on keyboard interrupt.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = load_config()
    relay = CompletionRelay(config)

    try:
        text = asyncio.run(relay.complete(args.prompt))
    except UpstreamTransportError as err:
        print(f"Upstream error: {err}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130

    if args.raw:
        for frame in frame_text(text, config.words_per_frame):
            print(frame, end="", flush=True)
    else:
        print(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
