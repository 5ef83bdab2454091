"""Tools for decision and problem tracking.

These functions are designed to be exposed as tools to the AI agent. Each
returns a ``ToolResult``; only unknown ids and invalid arguments produce an
error result; storage problems read as "nothing recorded yet".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypedDict

from decision_log.models import OUTCOMES, Decision, DecisionOption, Problem
from decision_log.query import filter_problems, search_decisions
from decision_log.render import render_context, render_decision_list, render_problem_list

if TYPE_CHECKING:
    from decision_log.store import RecordStore

STATUS_FILTERS = ("open", "resolved", "all")


class OptionInput(TypedDict):
    name: str
    description: str


@dataclass
class ToolResult:
    text: str
    is_error: bool = False


def _not_found(problem_id: str) -> ToolResult:
    return ToolResult(f"Problem not found: {problem_id}", is_error=True)


def get_decision_tools(store: RecordStore, session_id: str) -> dict[str, Callable[..., ToolResult]]:
    """Return a dict of tool_name -> callable for decision log operations.

    These can be registered as MCP tools or called directly.
    """

    def log_decision(
        topic: str,
        options: list[OptionInput],
        chosen: str,
        rationale: str,
        tags: list[str] | None = None,
    ) -> ToolResult:
        """Record a decision with the options considered and the rationale."""
        decision = Decision(
            topic=topic,
            options=[DecisionOption.from_dict(dict(o)) for o in options],
            chosen=chosen,
            rationale=rationale,
            tags=list(tags or []),
            session_id=session_id,
        )
        store.add_decision(decision)
        return ToolResult(f'Decision logged: "{topic}" → {chosen}')

    def open_problem(problem: str) -> ToolResult:
        """Begin tracking approaches to a problem."""
        entry = Problem(problem=problem, session_id=session_id)
        store.add_problem(entry)
        return ToolResult(f'Problem opened: "{problem}"\nID: {entry.id}')

    def log_approach(problem_id: str, approach: str, outcome: str, details: str) -> ToolResult:
        """Record a failed or successful approach to a problem."""
        if outcome not in OUTCOMES:
            return ToolResult(f"Invalid outcome: {outcome} (expected failed or succeeded)", is_error=True)
        p = store.update_problem(problem_id, lambda target: target.add_approach(approach, outcome, details))
        if p is None:
            return _not_found(problem_id)
        label = "FAILED" if outcome == "failed" else "SUCCEEDED"
        return ToolResult(f"Approach logged [{label}]: {approach} (problem: {p.problem})")

    def close_problem(problem_id: str, resolution: str) -> ToolResult:
        """Mark a problem as solved with a summary of what worked."""
        p = store.update_problem(problem_id, lambda target: target.close(resolution))
        if p is None:
            return _not_found(problem_id)
        return ToolResult(
            f'Problem closed: "{p.problem}"\n'
            f"Resolution: {resolution}\n"
            f"Approaches: {len(p.approaches)} ({p.failed_count} failed)"
        )

    def list_problems(status: str | None = None) -> ToolResult:
        """List the session's problems, optionally filtered by status."""
        if status is not None and status not in STATUS_FILTERS:
            return ToolResult(f"Invalid status: {status} (expected open, resolved or all)", is_error=True)
        return ToolResult(render_problem_list(filter_problems(store.read_problems(), status)))

    def get_context() -> ToolResult:
        """Read all session state: problems and this session's decisions."""
        return ToolResult(render_context(store.read_problems(), store.read_decisions(), session_id))

    def search(query: str | None = None, tags: list[str] | None = None) -> ToolResult:
        """Search project decisions across all sessions by keyword or tags."""
        return ToolResult(render_decision_list(search_decisions(store.read_decisions(), query, tags)))

    return {
        "log_decision": log_decision,
        "open_problem": open_problem,
        "log_approach": log_approach,
        "close_problem": close_problem,
        "list_problems": list_problems,
        "get_context": get_context,
        "search_decisions": search,
    }
