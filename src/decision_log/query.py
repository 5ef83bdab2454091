"""Decision search and problem filtering. No ranking: results keep store order."""

from __future__ import annotations

from collections.abc import Iterable

from decision_log.models import Decision, Problem


def _matches_text(decision: Decision, query: str) -> bool:
    q = query.lower()
    fields = [decision.topic, decision.chosen, decision.rationale]
    for option in decision.options:
        fields.extend([option.name, option.description])
    return any(q in f.lower() for f in fields)


def search_decisions(
    decisions: Iterable[Decision],
    query: str | None = None,
    tags: Iterable[str] | None = None,
) -> list[Decision]:
    """Case-insensitive substring match on text fields, ANDed with tag overlap.

    An empty or missing query and an empty or missing tag set each match
    everything.
    """
    wanted = set(tags or ())
    results = []
    for d in decisions:
        if query and not _matches_text(d, query):
            continue
        if wanted and not wanted & set(d.tags):
            continue
        results.append(d)
    return results


def filter_problems(problems: Iterable[Problem], status: str | None = None) -> list[Problem]:
    if not status or status == "all":
        return list(problems)
    return [p for p in problems if p.status == status]
