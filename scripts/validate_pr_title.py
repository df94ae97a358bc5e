#!/usr/bin/env python3
"""Check a PR title (and optional body) locally, without talking to GitHub.

Uses the same parser and rules as the labeler action, so a title that passes
here gets the same type / breaking change labels in CI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))
from conventional_commits.classifier import check_ticket_reference, classify_title  # noqa: E402
from conventional_commits.errors import ConventionalCommitError  # noqa: E402
from pr_labeler.config import ConfigError, parse_ticket_key_regex  # noqa: E402
from shared.constants import DEFAULT_TASK_TYPES  # noqa: E402


def _split_types(raw: str) -> list[str]:
    return [t.strip() for t in raw.replace("|", ",").split(",") if t.strip()]


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a PR title against Conventional Commits")
    parser.add_argument("title", nargs="?", default="", help="Pull request title")
    parser.add_argument("--body", default="", help="Pull request body")
    parser.add_argument(
        "--types",
        default=",".join(DEFAULT_TASK_TYPES),
        help="Allowed types, comma or pipe separated",
    )
    parser.add_argument("--ticket-regex", default="", help="Pattern the title must contain")
    args = parser.parse_args(argv)

    try:
        ticket_regex = parse_ticket_key_regex(args.ticket_regex.strip())
    except ConfigError as exc:
        print(f"::warning::{exc}")
        return 1

    title = args.title.strip()
    if not title:
        print("::warning::No PR title provided; skipping convention check.")
        return 0

    try:
        result = classify_title(title, args.body, _split_types(args.types))
        check_ticket_reference(title, ticket_regex)
    except ConventionalCommitError as exc:
        print(f"::warning::{exc}")
        print("Expected format: type(scope)!: short outcome")
        print(f"Received: {title}")
        return 1

    scope = f" scope={result.scope}" if result.scope else ""
    breaking = " (breaking change)" if result.breaking else ""
    print(f"PR title matches convention: type={result.type}{scope}{breaking}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
