from __future__ import annotations

import pytest

from conventional_commits.classifier import build_message, check_ticket_reference, classify, classify_title
from conventional_commits.errors import (
    ConventionalCommitError,
    EmptyInputError,
    MalformedHeaderError,
    TicketPatternMismatchError,
    UnknownOrMissingTypeError,
)
from conventional_commits.parser import parse
from conventional_commits.schema import ClassificationResult, Note, ParsedCommit

TASK_TYPES = ["feat", "fix", "docs", "test", "ci", "refactor", "perf", "chore", "revert"]


# -- classify_title ---------------------------------------------------------

@pytest.mark.parametrize(
    ("title", "body", "expected"),
    [
        (
            "feat: allow provided config object to extend other configs",
            "BREAKING CHANGE: `extends` key in config file is now used for extending other config files",
            ClassificationResult(type="feat", scope="", breaking=True),
        ),
        (
            "feat!: send an email to the customer when a product is shipped",
            None,
            ClassificationResult(type="feat", scope="", breaking=True),
        ),
        (
            "feat(api)!: send an email to the customer when a product is shipped",
            None,
            ClassificationResult(type="feat", scope="api", breaking=True),
        ),
        (
            "chore!: drop support for Node 6",
            "BREAKING CHANGE: use JavaScript features not available in Node 6.",
            ClassificationResult(type="chore", scope="", breaking=True),
        ),
        (
            "docs: correct spelling of CHANGELOG",
            None,
            ClassificationResult(type="docs", scope="", breaking=False),
        ),
        (
            "feat(lang): add Polish language",
            "",
            ClassificationResult(type="feat", scope="lang", breaking=False),
        ),
        (
            "fix: prevent racing of requests",
            "Introduce a request id and a reference to latest request. Dismiss\n"
            "incoming responses other than from latest request.\n"
            "\n"
            "Remove timeouts which were used to mitigate the racing issue but are\n"
            "obsolete now.\n"
            "\n"
            "Reviewed-by: Z\n"
            "Refs: #123",
            ClassificationResult(type="fix", scope="", breaking=False),
        ),
    ],
)
def test_classify_title_examples(title: str, body: str, expected: ClassificationResult) -> None:
    assert classify_title(title, body, TASK_TYPES) == expected


def test_classify_title_invalid_header() -> None:
    with pytest.raises(UnknownOrMissingTypeError) as exc_info:
        classify_title("hit it with a hammer", None, ["feat", "fix"])
    assert isinstance(exc_info.value, MalformedHeaderError)
    assert exc_info.value.header == "hit it with a hammer"
    assert exc_info.value.type == ""
    assert str(exc_info.value) == "Invalid or missing task type: ''. Must be one of: feat, fix"


def test_classify_title_type_not_allowed() -> None:
    with pytest.raises(UnknownOrMissingTypeError) as exc_info:
        classify_title("style: reformat", None, ["feat", "fix"])
    assert not isinstance(exc_info.value, MalformedHeaderError)
    assert exc_info.value.type == "style"
    assert exc_info.value.allowed_types == ["feat", "fix"]
    assert str(exc_info.value).startswith("Invalid or missing task type: 'style'.")


def test_classify_title_empty_title_is_a_core_error() -> None:
    with pytest.raises(ConventionalCommitError):
        classify_title("   ", None, TASK_TYPES)


def test_classify_title_blank_title_does_not_fall_back_to_body() -> None:
    with pytest.raises(EmptyInputError):
        classify_title("", "feat: from body", TASK_TYPES)
    with pytest.raises(EmptyInputError):
        classify_title("  ", "feat: from body", TASK_TYPES)


# -- classify ---------------------------------------------------------------

def test_classify_requires_exact_breaking_title() -> None:
    parsed = ParsedCommit(header="fix: x", type="fix", notes=(Note(title="breaking change", text="y"),))
    assert classify(parsed, TASK_TYPES).breaking is False

    parsed = ParsedCommit(header="fix: x", type="fix", notes=(Note(title="BREAKING-CHANGE", text="y"),))
    assert classify(parsed, TASK_TYPES).breaking is False

    parsed = ParsedCommit(header="fix: x", type="fix", notes=(Note(title="BREAKING CHANGE", text="y"),))
    assert classify(parsed, TASK_TYPES).breaking is True


def test_classify_empty_type_fails() -> None:
    with pytest.raises(UnknownOrMissingTypeError):
        classify(parse(": missing type"), TASK_TYPES)


def test_classify_missing_header_fails() -> None:
    with pytest.raises(UnknownOrMissingTypeError):
        classify(ParsedCommit(), TASK_TYPES)


def test_classify_scope_defaults_to_empty_string() -> None:
    result = classify(parse("perf: faster"), {"perf"})
    assert result == ClassificationResult(type="perf", scope="", breaking=False)


def test_build_message_joins_title_and_body() -> None:
    assert build_message("feat: x") == "feat: x"
    assert build_message("feat: x", "  ") == "feat: x"
    assert build_message("feat: x", "body") == "feat: x\n\nbody"


# -- check_ticket_reference -------------------------------------------------

def test_check_ticket_reference_without_pattern_is_noop() -> None:
    check_ticket_reference("no number here", None)
    check_ticket_reference("no number here", "")


def test_check_ticket_reference_missing_number() -> None:
    with pytest.raises(TicketPatternMismatchError) as exc_info:
        check_ticket_reference("no number here", r"\d+")
    assert exc_info.value.matched_text == ""
    assert str(exc_info.value) == "Invalid or missing task number: ''. Must match: \\d+"


def test_check_ticket_reference_present() -> None:
    check_ticket_reference("number here: 1234", r"\d+")
    check_ticket_reference("feat: PROJ-42 add login", r"[A-Z]+-\d+")


def test_check_ticket_reference_empty_match_fails() -> None:
    with pytest.raises(TicketPatternMismatchError):
        check_ticket_reference("feat: x", r"\d*")
