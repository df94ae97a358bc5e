"""Pull request labeler, run as a GitHub Actions step.

Reads the ``pull_request`` event payload, checks the title (and body) against
Conventional Commits, optionally checks a ticket number in the title and
keeps the type / breaking change labels on the pull request in sync.

Inputs (``INPUT_*`` environment variables, see ``pr_labeler.config``):
    task_types        JSON array of allowed types (required)
    ticket_key_regex  pattern the title must contain (optional)
    add_label         "false" disables labelling (default true)
    custom_labels     JSON object mapping type -> label name (optional)
    token             GitHub token (falls back to GITHUB_TOKEN)

Outputs (written to ``$GITHUB_OUTPUT``): ``type``, ``scope``, ``breaking``.

Any failure is reported as an ``::error::`` workflow command and exit code 1.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

import requests

from conventional_commits.classifier import check_ticket_reference, classify_title
from conventional_commits.errors import ConventionalCommitError
from conventional_commits.schema import ClassificationResult
from pr_labeler.config import ActionConfig, ConfigError, load_config
from shared.github_client import GitHubClient
from shared.labels import sync_labels
from shared.logging import get_logger

logger = get_logger("pr_labeler")


def load_event(event_path: str) -> dict[str, Any]:
    if not event_path:
        raise ConfigError("Missing GITHUB_EVENT_PATH; the labeler must run on a pull_request event")
    with open(event_path, encoding="utf-8") as handle:
        return json.load(handle)


def _pull_request(event: dict[str, Any]) -> dict[str, Any]:
    pr = event.get("pull_request")
    if not isinstance(pr, dict):
        raise ConfigError("Event payload has no pull_request")
    return pr


def _client(config: ActionConfig) -> GitHubClient:
    return GitHubClient(token_provider=lambda: config.token, api_base=config.api_base)


def _require_target(config: ActionConfig, number: Any) -> int:
    if not config.repository or number is None:
        raise ConfigError("Cannot reach the pull request without GITHUB_REPOSITORY and a pull request number")
    return int(number)


def run(
    config: ActionConfig,
    event: dict[str, Any],
    client: Optional[GitHubClient] = None,
) -> ClassificationResult:
    pr = _pull_request(event)
    number = pr.get("number")
    log = get_logger("pr_labeler", repo=config.repository or None, pr_number=number, run_id=config.run_id or None)

    if "title" not in pr:
        # trimmed payloads carry only the number; the title and body live on the API
        client = client or _client(config)
        pr = client.get_pull_request(config.owner, config.repo, _require_target(config, number))
        log.info("pull_request_fetched")

    title = pr.get("title") or ""
    result = classify_title(title, pr.get("body"), config.task_types)
    check_ticket_reference(title, config.ticket_key_regex)
    log.info(
        "pull_request_classified",
        extra={"extra": {"type": result.type, "scope": result.scope, "breaking": result.breaking}},
    )

    if config.add_label:
        issue_number = _require_target(config, number)
        sync_labels(
            client or _client(config),
            config.owner,
            config.repo,
            issue_number,
            result,
            config.task_types,
            config.custom_labels,
        )

    return result


def write_outputs(result: ClassificationResult, output_path: Optional[str]) -> None:
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as handle:
        handle.write(f"type={result.type}\n")
        handle.write(f"scope={result.scope}\n")
        handle.write(f"breaking={str(result.breaking).lower()}\n")


def main() -> int:
    try:
        config = load_config()
        result = run(config, load_event(config.event_path))
    except (ConventionalCommitError, ConfigError) as exc:
        print(f"::error::{exc}")
        logger.error("check_failed", extra={"extra": {"error": str(exc)}})
        return 1
    except requests.RequestException as exc:
        print(f"::error::GitHub API request failed: {exc}")
        logger.exception("github_request_failed")
        return 1

    write_outputs(result, os.getenv("GITHUB_OUTPUT"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
