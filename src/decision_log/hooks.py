"""Lifecycle hook entry points — SessionStart and PreCompact.

Usage (Claude Code hooks):
    python -m decision_log session-start
    python -m decision_log pre-compact

Each hook reads one JSON object from stdin (``{"cwd": ..., ...}``) and writes
at most one JSON object to stdout::

    {"continue": true, "suppressOutput": true, "systemMessage": "..."}

When there is nothing to report, or the input is unusable, the hook writes
nothing and exits 0. A hook must never fail the host process.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import IO

from decision_log.config import DecisionLogConfig
from decision_log.render import render_digest, render_session_start
from decision_log.store import ProjectStore

logger = logging.getLogger(__name__)


def read_payload(stream: IO[str]) -> dict:
    try:
        data = json.loads(stream.read())
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _project(payload: dict, config: DecisionLogConfig) -> ProjectStore | None:
    cwd = payload.get("cwd")
    if not cwd or not isinstance(cwd, str):
        return None
    return ProjectStore(config.storage_root, cwd, git_timeout=config.git_timeout)


def session_start(payload: dict, config: DecisionLogConfig) -> str | None:
    """Announce how many project decisions exist from prior sessions."""
    project = _project(payload, config)
    if project is None:
        return None
    return render_session_start(project.read_decisions())


def pre_compact(payload: dict, config: DecisionLogConfig) -> str | None:
    """Digest of the most recently active session, to survive compaction.

    Any ``session_id`` in the payload is ignored: the session is whichever one
    touched its metadata last.
    """
    project = _project(payload, config)
    if project is None or not project.project_dir.is_dir():
        return None
    session = project.latest_session()
    if session is None:
        return None
    return render_digest(
        project.read_session_problems(session.session_id),
        project.read_decisions(),
        session.session_id,
    )


HOOKS: dict[str, Callable[[dict, DecisionLogConfig], str | None]] = {
    "session-start": session_start,
    "pre-compact": pre_compact,
}


def run_hook(
    name: str,
    config: DecisionLogConfig,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> None:
    """Run a hook against stdin/stdout. Never raises."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    try:
        message = HOOKS[name](read_payload(stdin), config)
    except Exception as e:
        logger.warning("Hook %s failed: %s", name, e)
        return
    if not message:
        return
    stdout.write(json.dumps({"continue": True, "suppressOutput": True, "systemMessage": message}, ensure_ascii=False))
    stdout.flush()
