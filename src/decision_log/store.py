"""Record store — whole-file JSON collections rooted under a project key.

Every call re-reads its collection from disk and, for mutations, writes the
full collection back. There is no cache and no cross-process lock: two
writers interleaving a read-modify-write on ``decisions.json`` can lose an
update (last writer wins). Sessions are expected to write sequentially.

Read failures of any kind (missing file, unreadable file, invalid JSON, wrong
shape) are treated as an empty collection. That rule is implemented once, in
``_load_records``, and every read path goes through it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, TypeVar

from decision_log.models import Decision, Problem, SessionMetadata
from decision_log.project import GIT_TIMEOUT, resolve_project_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

DECISIONS_FILE = "decisions.json"
SESSIONS_DIR = "sessions"
METADATA_FILE = "metadata.json"
PROBLEMS_FILE = "problems.json"


def _read_collection(path: Path) -> list:
    """Read a JSON array. Anything else collapses to []."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable collection %s: %s", path, e)
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring %s: expected a JSON array", path)
        return []
    return data


def _load_records(path: Path, factory: Callable[[dict], T]) -> list[T]:
    try:
        return [factory(item) for item in _read_collection(path)]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Ignoring malformed records in %s: %s", path, e)
        return []


def _write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


class ProjectStore:
    """Read-only view of one project's storage directory.

    Never creates anything on disk, so the lifecycle hooks can use it against
    projects that have no history yet.
    """

    def __init__(
        self,
        root: Path,
        cwd: str,
        *,
        project_key: str | None = None,
        git_timeout: float = GIT_TIMEOUT,
    ) -> None:
        self.root = Path(root)
        self.cwd = cwd
        self.project_key = project_key or resolve_project_key(cwd, git_timeout)
        self.project_dir = self.root / self.project_key

    @property
    def decisions_path(self) -> Path:
        return self.project_dir / DECISIONS_FILE

    @property
    def sessions_dir(self) -> Path:
        return self.project_dir / SESSIONS_DIR

    def session_dir(self, session_id: str) -> Path:
        return self.sessions_dir / session_id

    def read_decisions(self) -> list[Decision]:
        return _load_records(self.decisions_path, Decision.from_dict)

    def read_session_problems(self, session_id: str) -> list[Problem]:
        return _load_records(self.session_dir(session_id) / PROBLEMS_FILE, Problem.from_dict)

    def latest_session(self) -> SessionMetadata | None:
        """Most recently active session, by metadata.json modification time.

        Ties go to the lexicographically greatest session directory name. This
        is a best-effort heuristic: it is deterministic within one call, not
        stable while other processes are writing.
        """
        if not self.sessions_dir.is_dir():
            return None

        candidates: list[tuple[float, str, Path]] = []
        for entry in self.sessions_dir.iterdir():
            meta_path = entry / METADATA_FILE
            try:
                mtime = meta_path.stat().st_mtime
            except OSError:
                continue
            candidates.append((mtime, entry.name, meta_path))
        if not candidates:
            return None

        _, name, meta_path = max(candidates)
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
            return SessionMetadata.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Unreadable session metadata %s: %s", meta_path, e)
            # The directory name is the session id.
            return SessionMetadata(session_id=name, project_slug=self.project_key, cwd=self.cwd, started_at="")


class RecordStore(ProjectStore):
    """Session-bound read/modify/write access to decisions and problems."""

    def __init__(
        self,
        root: Path,
        cwd: str,
        session_id: str,
        *,
        project_key: str | None = None,
        git_timeout: float = GIT_TIMEOUT,
    ) -> None:
        super().__init__(root, cwd, project_key=project_key, git_timeout=git_timeout)
        self.session_id = session_id
        self._ensure_initialized()

    def _ensure_initialized(self) -> None:
        """Create the session directory and write metadata once. Idempotent."""
        self.session_path.mkdir(parents=True, exist_ok=True)
        meta_path = self.session_path / METADATA_FILE
        if meta_path.exists():
            return
        meta = SessionMetadata(session_id=self.session_id, project_slug=self.project_key, cwd=self.cwd)
        _write_json(meta_path, meta.to_dict())
        logger.debug("Started session %s for project %s", self.session_id, self.project_key)

    @property
    def session_path(self) -> Path:
        return self.session_dir(self.session_id)

    @property
    def problems_path(self) -> Path:
        return self.session_path / PROBLEMS_FILE

    # ── Decisions (project-level) ─────────────────────────────

    def add_decision(self, decision: Decision) -> None:
        decisions = self.read_decisions()
        decisions.append(decision)
        _write_json(self.decisions_path, [d.to_dict() for d in decisions])
        logger.debug("Logged decision %s: %s", decision.id, decision.topic)

    # ── Problems (session-level) ──────────────────────────────

    def read_problems(self) -> list[Problem]:
        return _load_records(self.problems_path, Problem.from_dict)

    def _write_problems(self, problems: list[Problem]) -> None:
        _write_json(self.problems_path, [p.to_dict() for p in problems])

    def add_problem(self, problem: Problem) -> None:
        problems = self.read_problems()
        problems.append(problem)
        self._write_problems(problems)
        logger.debug("Opened problem %s: %s", problem.id, problem.problem)

    def update_problem(self, problem_id: str, mutation: Callable[[Problem], None]) -> Problem | None:
        """Apply mutation to the problem with problem_id and persist.

        Returns None without writing anything if no problem matches.
        """
        problems = self.read_problems()
        target = next((p for p in problems if p.id == problem_id), None)
        if target is None:
            return None
        mutation(target)
        self._write_problems(problems)
        return target

    def get_problem(self, problem_id: str) -> Problem | None:
        return next((p for p in self.read_problems() if p.id == problem_id), None)
