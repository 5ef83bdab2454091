"""Record types persisted by the store.

Field names match the on-disk JSON exactly; ``to_dict``/``from_dict`` are the
only (de)serialization path.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

Outcome = Literal["failed", "succeeded"]
Status = Literal["open", "resolved"]

OUTCOMES = ("failed", "succeeded")
STATUSES = ("open", "resolved")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def new_id() -> str:
    return str(uuid.uuid4())


_REQUIRED = object()


def _text(data: dict, key: str, default=_REQUIRED) -> str:
    """Fetch a string field, raising TypeError/KeyError for anything else."""
    value = data[key] if default is _REQUIRED else data.get(key, default)
    if not isinstance(value, str):
        raise TypeError(f"{key}: expected a string, got {type(value).__name__}")
    return value


def _items(data: dict, key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise TypeError(f"{key}: expected a list, got {type(value).__name__}")
    return value


def _texts(data: dict, key: str) -> list[str]:
    values = _items(data, key)
    if not all(isinstance(v, str) for v in values):
        raise TypeError(f"{key}: expected a list of strings")
    return list(values)


def _choice(data: dict, key: str, allowed: tuple[str, ...], default=_REQUIRED) -> str:
    value = _text(data, key, default)
    if value not in allowed:
        raise ValueError(f"{key}: unexpected value {value!r}")
    return value


@dataclass
class DecisionOption:
    """One alternative considered for a decision."""

    name: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> DecisionOption:
        return cls(name=_text(data, "name"), description=_text(data, "description", ""))


@dataclass
class Decision:
    """A resolved choice. Project-scoped and immutable once appended."""

    topic: str
    chosen: str
    rationale: str
    session_id: str
    options: list[DecisionOption] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    timestamp: str = field(default_factory=now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "session_id": self.session_id,
            "topic": self.topic,
            "options": [o.to_dict() for o in self.options],
            "chosen": self.chosen,
            "rationale": self.rationale,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Decision:
        return cls(
            id=_text(data, "id"),
            timestamp=_text(data, "timestamp"),
            session_id=_text(data, "session_id", ""),
            topic=_text(data, "topic"),
            options=[DecisionOption.from_dict(o) for o in _items(data, "options")],
            chosen=_text(data, "chosen"),
            rationale=_text(data, "rationale", ""),
            tags=_texts(data, "tags"),
        )


@dataclass
class Approach:
    """One attempt logged against a problem."""

    approach: str
    outcome: Outcome
    details: str
    timestamp: str = field(default_factory=now_iso)

    @property
    def failed(self) -> bool:
        return self.outcome == "failed"

    @property
    def label(self) -> str:
        return "FAILED" if self.failed else "SUCCEEDED"

    def to_dict(self) -> dict:
        return {
            "approach": self.approach,
            "outcome": self.outcome,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Approach:
        return cls(
            approach=_text(data, "approach"),
            outcome=_choice(data, "outcome", OUTCOMES),
            details=_text(data, "details", ""),
            timestamp=_text(data, "timestamp", ""),
        )


@dataclass
class Problem:
    """A session-scoped troubleshooting effort and its approach history."""

    problem: str
    session_id: str
    status: Status = "open"
    approaches: list[Approach] = field(default_factory=list)
    resolution: str | None = None
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=now_iso)

    @property
    def resolved(self) -> bool:
        return self.status == "resolved"

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.approaches if a.failed)

    def add_approach(self, approach: str, outcome: Outcome, details: str) -> Approach:
        entry = Approach(approach=approach, outcome=outcome, details=details)
        self.approaches.append(entry)
        return entry

    def close(self, resolution: str) -> None:
        # Re-closing a resolved problem just replaces the resolution.
        self.status = "resolved"
        self.resolution = resolution

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "session_id": self.session_id,
            "problem": self.problem,
            "status": self.status,
            "created_at": self.created_at,
            "approaches": [a.to_dict() for a in self.approaches],
        }
        if self.resolution is not None:
            data["resolution"] = self.resolution
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Problem:
        return cls(
            id=_text(data, "id"),
            session_id=_text(data, "session_id", ""),
            problem=_text(data, "problem"),
            status=_choice(data, "status", STATUSES, "open"),
            created_at=_text(data, "created_at", ""),
            approaches=[Approach.from_dict(a) for a in _items(data, "approaches")],
            resolution=_text(data, "resolution") if data.get("resolution") is not None else None,
        )


@dataclass
class SessionMetadata:
    """Written once per session directory; first writer wins."""

    session_id: str
    project_slug: str
    cwd: str
    started_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "project_slug": self.project_slug,
            "cwd": self.cwd,
            "started_at": self.started_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SessionMetadata:
        return cls(
            session_id=_text(data, "session_id"),
            project_slug=_text(data, "project_slug", ""),
            cwd=_text(data, "cwd", ""),
            started_at=_text(data, "started_at", ""),
        )
