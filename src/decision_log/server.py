"""decision-log MCP server.

Exposes the decision/problem tools over stdio. One server process is one
assistant session: the session id is generated at start-up and the process
working directory decides which project the records belong to.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from decision_log.config import DecisionLogConfig
from decision_log.store import RecordStore
from decision_log.tools import ToolResult, get_decision_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "decision-log"

MCP_INSTRUCTIONS = """decision-log keeps your working memory across context compaction.

WHEN TO LOG A DECISION (log_decision):
- You choose between two or more approaches, libraries, or designs
- The user settles a question of architecture or convention
Record the options you weighed and why the chosen one won.

WHEN TO TRACK A PROBLEM (open_problem / log_approach / close_problem):
- A bug or failure needs more than one attempt to fix
- Call log_approach after EVERY attempt, failed or not, before trying the next
- Close the problem with what finally worked and why

AFTER COMPACTION:
- Call get_context to reload problems and decisions for this session
- Call search_decisions before re-deciding something the project may already have settled"""


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def build_server(config: DecisionLogConfig, cwd: str, session_id: str) -> FastMCP:
    """Create the MCP server bound to one project directory and session."""
    store = RecordStore(config.storage_root, cwd, session_id, git_timeout=config.git_timeout)
    tools = get_decision_tools(store, session_id)
    logger.info("Session %s on project %s (%s)", session_id, store.project_key, cwd)

    mcp = FastMCP(SERVER_NAME, instructions=MCP_INSTRUCTIONS)

    @mcp.tool()
    def log_decision(
        topic: str,
        options: list[dict[str, str]],
        chosen: str,
        rationale: str,
        tags: list[str] | None = None,
    ) -> str:
        """Record a decision with options considered and rationale. Use this when you choose between approaches.

        Args:
            topic: What the decision is about.
            options: Options that were considered, each with a name and description.
            chosen: Which option was chosen.
            rationale: Why this option was chosen.
            tags: Tags for categorization (e.g. "auth", "architecture").
        """
        return _unwrap(tools["log_decision"](topic, options, chosen, rationale, tags))

    @mcp.tool()
    def open_problem(problem: str) -> str:
        """Begin tracking approaches to a problem. After calling this, use log_approach for EVERY approach you try.

        Args:
            problem: Description of the problem being investigated.
        """
        return _unwrap(tools["open_problem"](problem))

    @mcp.tool()
    def log_approach(
        problem_id: str,
        approach: str,
        outcome: Literal["failed", "succeeded"],
        details: str,
    ) -> str:
        """Record a failed or successful approach to an open problem. Call this after each attempt.

        Args:
            problem_id: ID from open_problem.
            approach: What approach was tried.
            outcome: Whether the approach failed or succeeded.
            details: What happened: error messages, why it failed, what worked.
        """
        return _unwrap(tools["log_approach"](problem_id, approach, outcome, details))

    @mcp.tool()
    def close_problem(problem_id: str, resolution: str) -> str:
        """Mark a problem as solved. Summarize what finally worked and why.

        Args:
            problem_id: ID from open_problem.
            resolution: Summary of the resolution.
        """
        return _unwrap(tools["close_problem"](problem_id, resolution))

    @mcp.tool()
    def list_problems(status: Literal["open", "resolved", "all"] | None = None) -> str:
        """List all problems in the current session, optionally filtered by status.

        Args:
            status: Filter by status (default: all).
        """
        return _unwrap(tools["list_problems"](status))

    @mcp.tool()
    def get_context() -> str:
        """Get all session state: decisions and problems (open and resolved). Use after context compaction."""
        return _unwrap(tools["get_context"]())

    @mcp.tool()
    def search_decisions(query: str | None = None, tags: list[str] | None = None) -> str:
        """Search project decisions across all sessions by keyword or tags.

        Args:
            query: Search text (matches topic, options, chosen option, rationale).
            tags: Filter by tags; a decision matches if it has any of them.
        """
        return _unwrap(tools["search_decisions"](query, tags))

    return mcp
