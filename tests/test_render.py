"""Tests for the context view, compaction digest and listings."""

from __future__ import annotations

import pytest

from decision_log.models import Decision, DecisionOption, Problem
from decision_log.render import (
    DIGEST_HEADER,
    EMPTY_CONTEXT,
    NO_DECISIONS,
    NO_PROBLEMS,
    render_context,
    render_decision_list,
    render_digest,
    render_problem_list,
    render_session_start,
    truncate,
)


def decision(topic: str, session_id: str = "s1", **kwargs) -> Decision:
    defaults = dict(chosen="B", rationale="durability required", options=[DecisionOption("B", "disk")], tags=[])
    defaults.update(kwargs)
    return Decision(topic=topic, session_id=session_id, **defaults)


@pytest.fixture
def problems() -> list[Problem]:
    open_p = Problem(problem="Auth middleware returning 401", session_id="s1")
    open_p.add_approach("Check token expiry", "failed", "Tokens were valid")
    open_p.add_approach("Inspect header parsing", "succeeded", "Bearer prefix was stripped twice")

    resolved = Problem(problem="CI cache misses", session_id="s1")
    resolved.add_approach("Bump cache key", "failed", "no change")
    resolved.add_approach("Pin runner image", "failed", "still missing")
    resolved.add_approach("Hash lockfile", "succeeded", "hits restored")
    resolved.close("cache key now hashes the lockfile")
    return [open_p, resolved]


class TestTruncate:
    def test_short_verbatim(self):
        assert truncate("abc") == "abc"

    def test_exact_limit_verbatim(self):
        text = "x" * 120
        assert truncate(text) == text

    def test_over_limit(self):
        text = "y" * 121
        assert truncate(text) == "y" * 120 + "..."


class TestRenderContext:
    def test_empty(self):
        assert render_context([], [], "s1") == EMPTY_CONTEXT

    def test_problems_with_all_approaches(self, problems):
        text = render_context(problems, [], "s1")
        assert "### [OPEN] Auth middleware returning 401" in text
        assert "- FAILED: Check token expiry — Tokens were valid" in text
        assert "- SUCCEEDED: Inspect header parsing — Bearer prefix was stripped twice" in text
        assert "### [RESOLVED] CI cache misses" in text
        assert "- RESOLUTION: cache key now hashes the lockfile" in text

    def test_details_not_truncated(self):
        p = Problem(problem="long", session_id="s1")
        p.add_approach("try", "failed", "z" * 500)
        assert "z" * 500 in render_context([p], [], "s1")

    def test_session_decisions_and_hint(self):
        decisions = [decision("cache backend"), decision("old choice", session_id="s0")]
        text = render_context([], decisions, "s1")
        assert "cache backend: B — durability required" in text
        assert "old choice" not in text
        assert "1 additional project decision(s) from prior sessions. Use search_decisions to query." in text

    def test_only_other_sessions(self):
        text = render_context([], [decision("old", session_id="s0")], "s1")
        assert text != EMPTY_CONTEXT
        assert "Decisions This Session" not in text
        assert "1 additional project decision(s)" in text


class TestRenderDigest:
    def test_nothing_returns_none(self):
        assert render_digest([], [], "s1") is None

    def test_sections(self, problems):
        text = render_digest(problems, [decision("cache backend")], "s1")
        assert text.startswith(DIGEST_HEADER)
        assert "OPEN PROBLEMS:\n[OPEN] Auth middleware returning 401" in text
        assert "  - FAILED: Check token expiry — Tokens were valid" in text
        assert "  - SUCCEEDED: Inspect header parsing — Bearer prefix was stripped twice" in text
        assert "RESOLVED PROBLEMS:\n- CI cache misses → cache key now hashes the lockfile (2 failed)" in text
        assert "DECISIONS THIS SESSION:\n- cache backend: B — durability required" in text

    def test_resolved_without_failures_has_no_suffix(self):
        p = Problem(problem="easy", session_id="s1")
        p.add_approach("just do it", "succeeded", "fine")
        p.close("done")
        text = render_digest([p], [], "s1")
        assert "- easy → done" in text
        assert "failed)" not in text

    def test_open_details_truncated(self):
        p = Problem(problem="long", session_id="s1")
        p.add_approach("exact", "failed", "a" * 120)
        p.add_approach("over", "failed", "b" * 121)
        text = render_digest([p], [], "s1")
        assert "exact — " + "a" * 120 + "\n" in text
        assert "over — " + "b" * 120 + "..." in text
        assert "b" * 121 not in text

    def test_other_session_decisions_counted(self):
        decisions = [decision("mine"), decision("theirs", session_id="s0"), decision("older", session_id="s0")]
        text = render_digest([], decisions, "s1")
        assert "- mine: B" in text
        assert "theirs" not in text
        assert "2 additional project decision(s) from prior sessions available via search_decisions." in text

    def test_only_other_session_decisions(self):
        text = render_digest([], [decision("theirs", session_id="s0")], "s1")
        assert text is not None
        assert "DECISIONS THIS SESSION" not in text


class TestListings:
    def test_session_start(self):
        assert render_session_start([]) is None
        text = render_session_start([decision("a"), decision("b")])
        assert text.startswith("Decision log: 2 project decision(s) on record")

    def test_problem_list_empty(self):
        assert render_problem_list([]) == NO_PROBLEMS

    def test_problem_list(self, problems):
        text = render_problem_list(problems)
        assert text.startswith("2 problem(s):")
        assert f"- [OPEN] Auth middleware returning 401 (2 approaches, 1 failed) [id: {problems[0].id}]" in text
        assert f"- [RESOLVED] CI cache misses → cache key now hashes the lockfile [id: {problems[1].id}]" in text

    def test_problem_list_singular(self):
        p = Problem(problem="one", session_id="s1")
        p.add_approach("a", "failed", "d")
        assert "(1 approach, 1 failed)" in render_problem_list([p])

    def test_decision_list_empty(self):
        assert render_decision_list([]) == NO_DECISIONS

    def test_decision_list(self):
        d = decision("cache backend", tags=["storage", "infra"], timestamp="2026-03-04T05:06:07.000+00:00")
        text = render_decision_list([d])
        assert text.startswith("Found 1 decision(s):")
        assert "- [2026-03-04] cache backend: B — durability required (tags: storage, infra)" in text
