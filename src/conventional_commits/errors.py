"""Typed failures raised by the commit parser and classifier."""

from __future__ import annotations

from typing import Iterable, Optional


class ConventionalCommitError(ValueError):
    pass


class EmptyInputError(ConventionalCommitError):
    def __init__(self) -> None:
        super().__init__("Expected a raw commit message, got empty input")


class UnknownOrMissingTypeError(ConventionalCommitError):
    def __init__(self, type_: Optional[str], allowed_types: Iterable[str]) -> None:
        self.type = type_ or ""
        self.allowed_types = list(allowed_types)
        super().__init__(
            f"Invalid or missing task type: '{self.type}'. "
            f"Must be one of: {', '.join(self.allowed_types)}"
        )


class MalformedHeaderError(UnknownOrMissingTypeError):
    """The header is missing or did not match the header patterns, so no type exists."""

    def __init__(self, header: Optional[str], allowed_types: Iterable[str]) -> None:
        self.header = header
        super().__init__(None, allowed_types)


class TicketPatternMismatchError(ConventionalCommitError):
    def __init__(self, matched_text: str, pattern: str) -> None:
        self.matched_text = matched_text
        self.pattern = pattern
        super().__init__(f"Invalid or missing task number: '{matched_text}'. Must match: {pattern}")
