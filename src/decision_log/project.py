"""Project identity — a short, stable storage key for a working directory.

The key is a truncated SHA-256 of the repository's ``origin`` URL, so every
checkout of the same repository shares one decision history. Directories
without a usable remote fall back to hashing their absolute path.
"""

from __future__ import annotations

import hashlib
import logging
import os
import subprocess

logger = logging.getLogger(__name__)

KEY_LENGTH = 12
GIT_TIMEOUT = 5.0


def short_hash(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:KEY_LENGTH]


def git_remote_url(cwd: str, timeout: float = GIT_TIMEOUT) -> str | None:
    """Return the ``origin`` remote URL for the repository containing cwd, if any."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=timeout,
        )
    # ValueError covers undecodable output and NUL bytes in cwd.
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        logger.debug("git remote lookup failed in %s: %s", cwd, e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_project_key(cwd: str, timeout: float = GIT_TIMEOUT) -> str:
    """Derive the project key for cwd. Never raises."""
    remote = git_remote_url(cwd, timeout)
    if remote:
        return short_hash(remote)
    return short_hash(os.path.abspath(cwd))
