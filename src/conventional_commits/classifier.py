from __future__ import annotations

import re
from typing import Collection, Optional

from conventional_commits.errors import (
    EmptyInputError,
    MalformedHeaderError,
    TicketPatternMismatchError,
    UnknownOrMissingTypeError,
)
from conventional_commits.parser import BREAKING_CHANGE_TITLE, CommitMessageParser, ParserOptions
from conventional_commits.schema import ClassificationResult, ParsedCommit


def is_breaking(parsed: ParsedCommit) -> bool:
    return any(note.title == BREAKING_CHANGE_TITLE for note in parsed.notes)


def classify(parsed: ParsedCommit, allowed_types: Collection[str]) -> ClassificationResult:
    """Validate the parsed type against the allow-list and derive the labels' inputs.

    Raises MalformedHeaderError (an UnknownOrMissingTypeError) when the header
    did not yield a type, UnknownOrMissingTypeError when the type is empty or
    not allowed.
    """
    if parsed.type is None:
        raise MalformedHeaderError(parsed.header, allowed_types)
    if not parsed.type or parsed.type not in allowed_types:
        raise UnknownOrMissingTypeError(parsed.type, allowed_types)

    return ClassificationResult(
        type=parsed.type,
        scope=parsed.scope or "",
        breaking=is_breaking(parsed),
    )


def build_message(title: str, body: Optional[str] = None) -> str:
    if body and body.strip():
        return f"{title}\n\n{body}"
    return title


def classify_title(
    title: str,
    body: Optional[str],
    allowed_types: Collection[str],
    options: Optional[ParserOptions] = None,
) -> ClassificationResult:
    # the header always comes from the title, never from the body
    if not title or not title.strip():
        raise EmptyInputError()
    parser = CommitMessageParser(options or ParserOptions.conventional())
    return classify(parser.parse(build_message(title, body)), allowed_types)


def check_ticket_reference(title: str, pattern: Optional[str]) -> None:
    if not pattern:
        return

    match = re.search(pattern, title)
    matched_text = match.group(0) if match else ""
    if not matched_text:
        raise TicketPatternMismatchError(matched_text, pattern)
