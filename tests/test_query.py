"""Tests for decision search and problem filtering."""

import pytest

from decision_log.models import Decision, DecisionOption, Problem
from decision_log.query import filter_problems, search_decisions


@pytest.fixture
def decisions() -> list[Decision]:
    return [
        Decision(
            topic="Cache backend",
            options=[DecisionOption("A", "in-memory"), DecisionOption("B", "disk-backed")],
            chosen="B",
            rationale="durability required",
            tags=["storage"],
            session_id="s1",
        ),
        Decision(
            topic="Web framework",
            options=[DecisionOption("Flask", "minimal"), DecisionOption("Django", "batteries included")],
            chosen="Flask",
            rationale="Team familiarity",
            tags=["framework", "web"],
            session_id="s2",
        ),
        Decision(
            topic="Logging format",
            options=[],
            chosen="JSON lines",
            rationale="machine readable",
            tags=[],
            session_id="s1",
        ),
    ]


def topics(results: list[Decision]) -> list[str]:
    return [d.topic for d in results]


class TestSearchDecisions:
    def test_no_filters_returns_all_in_order(self, decisions):
        assert search_decisions(decisions) == decisions
        assert search_decisions(decisions, query="", tags=[]) == decisions

    def test_topic_case_insensitive(self, decisions):
        assert topics(search_decisions(decisions, query="CACHE")) == ["Cache backend"]

    def test_matches_chosen(self, decisions):
        assert topics(search_decisions(decisions, query="json lines")) == ["Logging format"]

    def test_matches_rationale(self, decisions):
        assert topics(search_decisions(decisions, query="familiar")) == ["Web framework"]

    def test_matches_option_name_and_description(self, decisions):
        assert topics(search_decisions(decisions, query="django")) == ["Web framework"]
        assert topics(search_decisions(decisions, query="in-memory")) == ["Cache backend"]

    def test_no_match(self, decisions):
        assert search_decisions(decisions, query="kubernetes") == []

    def test_tag_intersection(self, decisions):
        assert topics(search_decisions(decisions, tags=["storage"])) == ["Cache backend"]
        assert topics(search_decisions(decisions, tags=["web", "storage"])) == ["Cache backend", "Web framework"]

    def test_tags_exact_match(self, decisions):
        assert search_decisions(decisions, tags=["Storage"]) == []
        assert search_decisions(decisions, tags=["stor"]) == []

    def test_query_and_tags_are_anded(self, decisions):
        assert search_decisions(decisions, query="flask", tags=["storage"]) == []
        assert topics(search_decisions(decisions, query="flask", tags=["web"])) == ["Web framework"]


class TestFilterProblems:
    @pytest.fixture
    def problems(self) -> list[Problem]:
        resolved = Problem(problem="fixed", session_id="s1")
        resolved.close("done")
        return [Problem(problem="open one", session_id="s1"), resolved]

    @pytest.mark.parametrize("status", [None, "all"])
    def test_all(self, problems, status):
        assert filter_problems(problems, status) == problems

    def test_open(self, problems):
        assert [p.problem for p in filter_problems(problems, "open")] == ["open one"]

    def test_resolved(self, problems):
        assert [p.problem for p in filter_problems(problems, "resolved")] == ["fixed"]
