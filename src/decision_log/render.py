"""Text views over stored records.

Two consumers want different shapes:

* ``render_context`` — on-demand dump for the ``get_context`` tool. Complete,
  nothing truncated.
* ``render_digest`` — injected by the pre-compaction hook. Open problems in
  detail with capped approach details, resolved problems as one-liners, and
  ``None`` when there is nothing worth injecting.

The listing helpers back ``list_problems`` and ``search_decisions``.
"""

from __future__ import annotations

from decision_log.models import Decision, Problem

DETAIL_LIMIT = 120
TRUNCATION_MARKER = "..."

EMPTY_CONTEXT = "No decisions or problems recorded in this session yet."
NO_PROBLEMS = "No problems found."
NO_DECISIONS = "No matching decisions found."
DIGEST_HEADER = "DECISION LOG (preserved through compaction) — use get_context for full details."


def truncate(text: str, limit: int = DETAIL_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _decision_line(d: Decision) -> str:
    return f"- {d.topic}: {d.chosen} — {d.rationale}"


def _split_decisions(decisions: list[Decision], session_id: str | None) -> tuple[list[Decision], int]:
    """Return (this session's decisions, count of the rest)."""
    if session_id is None:
        return list(decisions), 0
    current = [d for d in decisions if d.session_id == session_id]
    return current, len(decisions) - len(current)


def render_context(problems: list[Problem], decisions: list[Decision], session_id: str) -> str:
    """Full session state: every problem, this session's decisions, a hint for the rest."""
    parts: list[str] = []

    if problems:
        parts.append("## Problems\n")
        for p in problems:
            status = "RESOLVED" if p.resolved else "OPEN"
            parts.append(f"### [{status}] {p.problem}")
            for a in p.approaches:
                parts.append(f"- {a.label}: {a.approach} — {a.details}")
            if p.resolution:
                parts.append(f"- RESOLUTION: {p.resolution}")
            parts.append("")

    current, others = _split_decisions(decisions, session_id)
    if current:
        parts.append("## Decisions This Session\n")
        parts.extend(_decision_line(d) for d in current)
        parts.append("")

    if others > 0:
        parts.append(
            f"\n{others} additional project decision(s) from prior sessions. "
            "Use search_decisions to query."
        )

    return "\n".join(parts) if parts else EMPTY_CONTEXT


def render_digest(
    problems: list[Problem],
    decisions: list[Decision],
    session_id: str | None,
    detail_limit: int = DETAIL_LIMIT,
) -> str | None:
    """Compact pre-compaction summary, or None if there is nothing to report."""
    lines: list[str] = []

    open_problems = [p for p in problems if not p.resolved]
    resolved = [p for p in problems if p.resolved]

    if open_problems:
        lines.append("OPEN PROBLEMS:")
        for p in open_problems:
            lines.append(f"[OPEN] {p.problem}")
            for a in p.approaches:
                lines.append(f"  - {a.label}: {a.approach} — {truncate(a.details, detail_limit)}")
            lines.append("")

    if resolved:
        lines.append("RESOLVED PROBLEMS:")
        for p in resolved:
            failed = p.failed_count
            suffix = f" ({failed} failed)" if failed > 0 else ""
            lines.append(f"- {p.problem} → {p.resolution or 'resolved'}{suffix}")
        lines.append("")

    current, others = _split_decisions(decisions, session_id)
    if current:
        lines.append("DECISIONS THIS SESSION:")
        lines.extend(_decision_line(d) for d in current)
        lines.append("")
    if others > 0:
        lines.append(f"{others} additional project decision(s) from prior sessions available via search_decisions.")

    if not lines:
        return None
    return "\n".join([DIGEST_HEADER, "", *lines]).rstrip("\n")


def render_session_start(decisions: list[Decision]) -> str | None:
    if not decisions:
        return None
    return (
        f"Decision log: {len(decisions)} project decision(s) on record from prior sessions. "
        "Use search_decisions to query history."
    )


def render_problem_list(problems: list[Problem]) -> str:
    if not problems:
        return NO_PROBLEMS
    lines = []
    for p in problems:
        status = "RESOLVED" if p.resolved else "OPEN"
        if p.resolution:
            summary = f" → {p.resolution}"
        else:
            count = len(p.approaches)
            noun = "approach" if count == 1 else "approaches"
            summary = f" ({count} {noun}, {p.failed_count} failed)"
        lines.append(f"- [{status}] {p.problem}{summary} [id: {p.id}]")
    return f"{len(problems)} problem(s):\n\n" + "\n".join(lines)


def render_decision_list(decisions: list[Decision]) -> str:
    if not decisions:
        return NO_DECISIONS
    lines = []
    for d in decisions:
        tags = f" (tags: {', '.join(d.tags)})" if d.tags else ""
        lines.append(f"- [{d.timestamp[:10]}] {d.topic}: {d.chosen} — {d.rationale}{tags}")
    return f"Found {len(decisions)} decision(s):\n\n" + "\n".join(lines)
