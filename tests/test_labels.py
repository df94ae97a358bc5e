from __future__ import annotations

import re
from unittest.mock import MagicMock, call

from conventional_commits.schema import ClassificationResult
from shared.labels import (
    BREAKING_CHANGE_LABEL,
    derive_color,
    managed_labels,
    plan_labels,
    sync_labels,
    target_labels,
)

TASK_TYPES = ["feat", "fix", "docs", "test", "ci", "refactor", "perf", "chore", "revert"]


# -- derive_color -------------------------------------------------------------

def test_derive_color_known_values() -> None:
    # h("feat") = 0x2FE532, h("fix") = 0x018C15; bytes are emitted low byte first
    assert derive_color("feat") == "32e52f"
    assert derive_color("fix") == "158c01"
    assert derive_color("") == "000000"


def test_derive_color_is_deterministic_hex() -> None:
    for label in TASK_TYPES + [BREAKING_CHANGE_LABEL, "a much longer custom label name 🚀"]:
        color = derive_color(label)
        assert re.fullmatch(r"[0-9a-f]{6}", color)
        assert derive_color(label) == color


def test_derive_color_distinct_for_default_labels() -> None:
    labels = TASK_TYPES + [BREAKING_CHANGE_LABEL]
    assert len({derive_color(label) for label in labels}) == len(labels)


# -- plan_labels --------------------------------------------------------------

def test_target_labels_uses_custom_mapping_and_breaking_label() -> None:
    result = ClassificationResult(type="feat", scope="", breaking=True)
    assert target_labels(result, {"feat": "enhancement"}) == ["enhancement", BREAKING_CHANGE_LABEL]
    assert target_labels(ClassificationResult(type="fix")) == ["fix"]


def test_managed_labels_include_custom_values_once() -> None:
    managed = managed_labels(["feat", "fix"], {"feat": "enhancement", "fix": "fix"})
    assert managed == ["feat", "fix", BREAKING_CHANGE_LABEL, "enhancement"]


def test_plan_removes_stale_managed_labels_only() -> None:
    plan = plan_labels(
        ["feat", "fix", BREAKING_CHANGE_LABEL, "needs review"],
        ClassificationResult(type="fix", breaking=False),
        ["feat", "fix"],
    )
    assert plan.target == ("fix",)
    assert plan.to_remove == ("feat", BREAKING_CHANGE_LABEL)
    assert plan.to_add == ()


def test_plan_with_custom_labels() -> None:
    plan = plan_labels(
        ["bug", "wip"],
        ClassificationResult(type="feat", breaking=True),
        ["feat", "fix"],
        {"feat": "enhancement", "fix": "bug"},
    )
    assert plan.target == ("enhancement", BREAKING_CHANGE_LABEL)
    assert plan.to_remove == ("bug",)
    assert plan.to_add == ("enhancement", BREAKING_CHANGE_LABEL)


# -- sync_labels --------------------------------------------------------------

def test_sync_labels_replaces_type_label_and_creates_missing_label() -> None:
    client = MagicMock()
    client.list_labels_on_issue.return_value = ["chore"]
    client.get_label.return_value = None

    plan = sync_labels(client, "o", "r", 123, ClassificationResult(type="feat"), TASK_TYPES)

    assert plan.to_remove == ("chore",)
    client.remove_label_from_issue.assert_called_once_with("o", "r", 123, "chore")
    client.create_label.assert_called_once_with("o", "r", "feat", derive_color("feat"))
    client.add_labels_to_issue.assert_called_once_with("o", "r", 123, ["feat"])


def test_sync_labels_reuses_existing_repository_label() -> None:
    client = MagicMock()
    client.list_labels_on_issue.return_value = []
    client.get_label.return_value = {"name": "feat", "color": "ffffff"}

    sync_labels(client, "o", "r", 7, ClassificationResult(type="feat", breaking=True), TASK_TYPES)

    client.create_label.assert_not_called()
    client.remove_label_from_issue.assert_not_called()
    assert client.add_labels_to_issue.call_args_list == [
        call("o", "r", 7, ["feat"]),
        call("o", "r", 7, [BREAKING_CHANGE_LABEL]),
    ]


def test_sync_labels_noop_when_labels_already_match() -> None:
    client = MagicMock()
    client.list_labels_on_issue.return_value = ["fix", "question"]

    plan = sync_labels(client, "o", "r", 1, ClassificationResult(type="fix"), TASK_TYPES)

    assert plan.to_remove == ()
    assert plan.to_add == ()
    client.remove_label_from_issue.assert_not_called()
    client.get_label.assert_not_called()
    client.add_labels_to_issue.assert_not_called()
