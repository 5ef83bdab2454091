"""Entry point: python -m decision_log [serve|session-start|pre-compact]

- No args / "serve": MCP server over stdio (one process per assistant session)
- "session-start":   SessionStart hook (JSON on stdin, JSON on stdout)
- "pre-compact":     PreCompact hook
"""

from __future__ import annotations

import logging
import os
import sys
import uuid

from decision_log.config import load_config


def _setup_logging(level: str) -> None:
    # stderr only: stdout carries the MCP protocol and hook output.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _usage() -> None:
    print("Usage: python -m decision_log [serve|session-start|pre-compact]")
    print("  serve [--session-id ID]  — MCP server over stdio (default)")
    print("  session-start            — SessionStart hook")
    print("  pre-compact              — PreCompact hook")
    sys.exit(1)


def _run_serve(args: list[str]) -> None:
    """MCP server mode."""
    if args and (len(args) != 2 or args[0] != "--session-id" or not args[1]):
        _usage()
    session_id = args[1] if args else str(uuid.uuid4())

    config = load_config()
    _setup_logging(config.log_level)

    from decision_log.server import build_server

    mcp = build_server(config, os.getcwd(), session_id)
    mcp.run(transport="stdio")


def _run_hook(name: str) -> None:
    """Hook mode — always exits 0."""
    try:
        config = load_config()
    except Exception:
        # A broken config file must not fail the host process.
        return
    _setup_logging(config.log_level)

    from decision_log.hooks import run_hook

    run_hook(name, config)


def hook_main() -> None:
    """Console script: decision-log-hook <session-start|pre-compact>"""
    name = sys.argv[1] if len(sys.argv) > 1 else ""
    if name in ("session-start", "pre-compact"):
        _run_hook(name)


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if cmd == "serve":
        _run_serve(sys.argv[2:])
    elif cmd in ("session-start", "pre-compact"):
        _run_hook(cmd)
    else:
        _usage()


if __name__ == "__main__":
    main()
