"""Shared constants used by the labeler entrypoints."""

from __future__ import annotations

DEFAULT_API_BASE = "https://api.github.com"

# Used when the task_types input is not given to the local title checker
DEFAULT_TASK_TYPES = ("feat", "fix", "docs", "test", "ci", "refactor", "perf", "chore", "revert")

# Label added next to the type label when the title or body declares a breaking change
BREAKING_CHANGE_LABEL = "breaking change"

# Seconds before a single GitHub API request is abandoned
REQUEST_TIMEOUT_SECONDS = 20
