"""decision-log — decisions and problem trails that survive context compaction.

Layout:
    ~/.claude/decision-log/
    └── <project_key>/                 # sha256(origin URL or cwd)[:12]
        ├── decisions.json             # Project-wide, append-only
        └── sessions/
            └── <session_id>/
                ├── metadata.json      # Written once, first writer wins
                └── problems.json      # Problems + approaches for this session
"""

__version__ = "0.1.0"
