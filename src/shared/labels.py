"""Label reconciliation for a classified pull request.

The labeler owns a fixed set of labels: every allowed type, the breaking
change label and any custom label names mapped from types. On each run the
owned labels that no longer apply are removed and the target labels are
created (if the repository lacks them) and added. Labels outside the owned
set are never touched.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Collection, Mapping, Optional

from conventional_commits.schema import ClassificationResult
from shared.constants import BREAKING_CHANGE_LABEL
from shared.github_client import GitHubClient
from shared.logging import get_logger


@dataclass(frozen=True)
class LabelPlan:
    target: tuple[str, ...]
    to_remove: tuple[str, ...]
    to_add: tuple[str, ...]


def derive_color(label: str) -> str:
    """Deterministic 6-digit hex color for a label name.

    Rolling ``h = h * 31 + c`` over UTF-16 code units kept to 32 bits; the
    color is the low three bytes of ``h``, least significant first.
    """
    h = 0
    for (code_unit,) in struct.iter_unpack("<H", label.encode("utf-16-le")):
        h = (h * 31 + code_unit) & 0xFFFFFFFF
    return "".join(f"{(h >> shift) & 0xFF:02x}" for shift in (0, 8, 16))


def target_labels(result: ClassificationResult, custom_labels: Optional[Mapping[str, str]] = None) -> list[str]:
    custom = custom_labels or {}
    labels = [custom.get(result.type) or result.type]
    if result.breaking and BREAKING_CHANGE_LABEL not in labels:
        labels.append(BREAKING_CHANGE_LABEL)
    return labels


def managed_labels(allowed_types: Collection[str], custom_labels: Optional[Mapping[str, str]] = None) -> list[str]:
    managed = list(allowed_types) + [BREAKING_CHANGE_LABEL]
    for label in (custom_labels or {}).values():
        if label not in managed:
            managed.append(label)
    return managed


def plan_labels(
    current: Collection[str],
    result: ClassificationResult,
    allowed_types: Collection[str],
    custom_labels: Optional[Mapping[str, str]] = None,
) -> LabelPlan:
    target = target_labels(result, custom_labels)
    managed = managed_labels(allowed_types, custom_labels)
    return LabelPlan(
        target=tuple(target),
        to_remove=tuple(label for label in current if label in managed and label not in target),
        to_add=tuple(label for label in target if label not in current),
    )


def sync_labels(
    client: GitHubClient,
    owner: str,
    repo: str,
    issue_number: int,
    result: ClassificationResult,
    allowed_types: Collection[str],
    custom_labels: Optional[Mapping[str, str]] = None,
) -> LabelPlan:
    current = client.list_labels_on_issue(owner, repo, issue_number)
    plan = plan_labels(current, result, allowed_types, custom_labels)
    log = get_logger("labels", repo=f"{owner}/{repo}", pr_number=issue_number)

    for label in plan.to_remove:
        client.remove_label_from_issue(owner, repo, issue_number, label)
        log.info("label_removed", extra={"label": label})

    for label in plan.to_add:
        if client.get_label(owner, repo, label) is None:
            color = derive_color(label)
            client.create_label(owner, repo, label, color)
            log.info("label_created", extra={"label": label, "extra": {"color": color}})
        client.add_labels_to_issue(owner, repo, issue_number, [label])
        log.info("label_added", extra={"label": label})

    return plan
