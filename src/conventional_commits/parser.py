"""Conventional Commits message parser.

Decomposes a raw commit message (or a pull request title followed by its
body) into a :class:`~conventional_commits.schema.ParsedCommit`::

    type(scope)!: subject        <- header

    Free-form body text,         <- body
    possibly several paragraphs.

    Reviewed-by: Z               <- footer
    BREAKING CHANGE: details     <- note (also part of the footer)
    Closes acme/widgets#45       <- reference (also part of the footer)

Word and digit classes are ASCII-only, so ``féat: x`` has no type.
Lines are consumed in a single forward pass. Before the pass the message is
truncated at the git scissor line and comment / ``gpg:`` lines are dropped.
The parser keeps no state between calls, so one instance can be shared.
"""

from __future__ import annotations

import dataclasses
import enum
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from conventional_commits.errors import EmptyInputError
from conventional_commits.schema import Note, ParsedCommit, Reference

PatternLike = Union[str, re.Pattern[str]]

SCISSOR_LINE = "# ------------------------ >8 ------------------------"
BREAKING_CHANGE_TITLE = "BREAKING CHANGE"

DEFAULT_NOTE_KEYWORDS = ("BREAKING CHANGE", "BREAKING-CHANGE")
DEFAULT_ISSUE_PREFIXES = ("#",)
DEFAULT_REFERENCE_ACTIONS = (
    "close",
    "closes",
    "closed",
    "fix",
    "fixes",
    "fixed",
    "resolve",
    "resolves",
    "resolved",
)
DEFAULT_HEADER_PATTERN = r"^(\w*)(?:\(([\w$.\-*/ ]*)\))?: (.*)$"
DEFAULT_HEADER_CORRESPONDENCE = ("type", "scope", "subject")
DEFAULT_REVERT_PATTERN = r'^Revert\s"([\s\S]*)"\s*This reverts commit (\w*)\.'
DEFAULT_REVERT_CORRESPONDENCE = ("header", "hash")
DEFAULT_FIELD_PATTERN = r"^-(.*?)-$"

# `type(scope)!: subject`; group 3 becomes the text of the synthesized note.
CONVENTIONAL_BREAKING_HEADER_PATTERN = r"^(\w*)(?:\((.*)\))?!: (.*)$"

_NO_MATCH_RE = re.compile(r"(?!.*)")
_WHOLE_LINE_RE = re.compile(r"()(.+)")
_GPG_RE = re.compile(r"^\s*gpg:")
_MENTION_RE = re.compile(r"@([\w-]+)", re.ASCII)
_LINE_SPLIT_RE = re.compile(r"\r?\n")

# Correspondence names stored as attributes; anything else lands in extra_fields.
_HEADER_ATTRIBUTES = frozenset({"type", "scope", "subject"})


@dataclass(frozen=True)
class ParserOptions:
    note_keywords: Sequence[str] = DEFAULT_NOTE_KEYWORDS
    issue_prefixes: Sequence[str] = DEFAULT_ISSUE_PREFIXES
    issue_prefixes_case_sensitive: bool = False
    reference_actions: Sequence[str] = DEFAULT_REFERENCE_ACTIONS
    header_pattern: Optional[PatternLike] = DEFAULT_HEADER_PATTERN
    header_correspondence: Sequence[str] = DEFAULT_HEADER_CORRESPONDENCE
    breaking_header_pattern: Optional[PatternLike] = None
    revert_pattern: Optional[PatternLike] = DEFAULT_REVERT_PATTERN
    revert_correspondence: Sequence[str] = DEFAULT_REVERT_CORRESPONDENCE
    field_pattern: Optional[PatternLike] = DEFAULT_FIELD_PATTERN
    merge_pattern: Optional[PatternLike] = None
    merge_correspondence: Sequence[str] = ()
    comment_char: Optional[str] = None

    @classmethod
    def conventional(cls, **overrides) -> "ParserOptions":
        """Defaults plus detection of the ``type(scope)!:`` breaking marker."""
        base = cls(breaking_header_pattern=CONVENTIONAL_BREAKING_HEADER_PATTERN)
        return dataclasses.replace(base, **overrides)


class _Mode(enum.Enum):
    BODY = "body"
    FOOTER = "footer"
    NOTE = "note"


@dataclass
class _NoteDraft:
    title: str
    text: str


@dataclass
class _CommitDraft:
    merge: Optional[str] = None
    header: Optional[str] = None
    attributes: dict[str, Optional[str]] = field(default_factory=dict)
    body: Optional[str] = None
    footer: Optional[str] = None
    notes: list[_NoteDraft] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    revert: Optional[dict[str, Optional[str]]] = None
    extra_fields: dict[str, Optional[str]] = field(default_factory=dict)

    def assign(self, name: str, value: Optional[str]) -> None:
        if name in _HEADER_ATTRIBUTES:
            self.attributes[name] = value
        else:
            self.extra_fields[name] = value

    def build(self) -> ParsedCommit:
        return ParsedCommit(
            merge=self.merge,
            header=self.header,
            type=self.attributes.get("type"),
            scope=self.attributes.get("scope"),
            subject=self.attributes.get("subject"),
            body=_trim_newlines(self.body) or None,
            footer=_trim_newlines(self.footer) or None,
            notes=tuple(Note(title=n.title, text=_trim_newlines(n.text)) for n in self.notes),
            references=tuple(self.references),
            mentions=tuple(self.mentions),
            revert=self.revert,
            extra_fields=self.extra_fields,
        )


def _compile(pattern: Optional[PatternLike]) -> Optional[re.Pattern[str]]:
    if pattern is None:
        return None
    if isinstance(pattern, str):
        return re.compile(pattern, re.ASCII)
    return pattern


def _join_alternatives(values: Sequence[str]) -> str:
    return "|".join(re.escape(v.strip()) for v in values if v and v.strip())


def _trim_newlines(text: Optional[str]) -> str:
    return (text or "").strip("\r\n")


def _append_line(src: Optional[str], line: str) -> str:
    return f"{src}\n{line}" if src else line


def _group(match: re.Match, index: int) -> Optional[str]:
    """Capture group value; None when the group does not exist or did not participate."""
    if index > match.re.groups:
        return None
    return match.group(index)


class CommitMessageParser:
    def __init__(self, options: Optional[ParserOptions] = None) -> None:
        self._options = options or ParserOptions()
        opts = self._options

        keywords = _join_alternatives(opts.note_keywords)
        self._notes_re = re.compile(rf"^[\s|*]*({keywords})[:\s]+(.*)", re.IGNORECASE | re.ASCII) if keywords else _NO_MATCH_RE

        prefixes = _join_alternatives(opts.issue_prefixes)
        if prefixes:
            flags = re.ASCII if opts.issue_prefixes_case_sensitive else re.IGNORECASE | re.ASCII
            self._reference_parts_re = re.compile(rf"(?:.*?)??\s*([\w\-./]*?)??({prefixes})([\w-]*\d+)", flags)
        else:
            self._reference_parts_re = _NO_MATCH_RE

        actions = _join_alternatives(opts.reference_actions)
        if actions:
            self._references_re = re.compile(rf"({actions})(?:\s+(.*?))(?=(?:{actions})|$)", re.IGNORECASE | re.ASCII)
        else:
            self._references_re = _WHOLE_LINE_RE

        self._header_re = _compile(opts.header_pattern)
        self._breaking_header_re = _compile(opts.breaking_header_pattern)
        self._revert_re = _compile(opts.revert_pattern)
        self._field_re = _compile(opts.field_pattern)
        self._merge_re = _compile(opts.merge_pattern)

    @property
    def options(self) -> ParserOptions:
        return self._options

    def parse(self, raw: str) -> ParsedCommit:
        if not raw or not raw.strip():
            raise EmptyInputError()

        lines = self._prepare_lines(raw)
        draft = _CommitDraft()

        cursor = self._parse_merge(lines, draft)
        cursor = self._parse_header(lines, cursor, draft)
        if draft.header:
            draft.references.extend(self.parse_references(draft.header))

        self._parse_body_and_footer(lines[cursor:], draft)
        self._parse_breaking_header(draft)

        draft.mentions.extend(_MENTION_RE.findall(raw))
        draft.revert = self._parse_revert(raw)
        return draft.build()

    def parse_references(self, text: str) -> list[Reference]:
        """Extract issue references from one line of text.

        A line without any reference action is treated as a single sentence
        with no action, so ``Refs: #123`` still yields issue ``123``.
        """
        matches = list(self._references_re.finditer(text))
        if not matches:
            matches = list(_WHOLE_LINE_RE.finditer(text))

        references: list[Reference] = []
        for match in matches:
            action = match.group(1) or None
            sentence = match.group(2) or ""
            for part in self._reference_parts_re.finditer(sentence):
                references.append(_build_reference(part, action))
        return references

    def _prepare_lines(self, raw: str) -> list[str]:
        lines = _LINE_SPLIT_RE.split(_trim_newlines(raw))
        if SCISSOR_LINE in lines:
            lines = lines[: lines.index(SCISSOR_LINE)]

        comment_char = self._options.comment_char
        return [
            line
            for line in lines
            if not (comment_char and line.startswith(comment_char)) and not _GPG_RE.search(line)
        ]

    def _parse_merge(self, lines: list[str], draft: _CommitDraft) -> int:
        if self._merge_re is None or not lines:
            return 0

        match = self._merge_re.search(lines[0])
        if not match:
            return 0

        draft.merge = match.group(0) or None
        for index, name in enumerate(self._options.merge_correspondence, start=1):
            draft.assign(name, _group(match, index))
        return 1

    def _parse_header(self, lines: list[str], cursor: int, draft: _CommitDraft) -> int:
        while cursor < len(lines) and not lines[cursor].strip():
            cursor += 1
        if cursor >= len(lines):
            return cursor

        header = lines[cursor]
        draft.header = header

        match = None
        if self._breaking_header_re is not None:
            match = self._breaking_header_re.search(header)
        if match is None and self._header_re is not None:
            match = self._header_re.search(header)

        if match is not None:
            for index, name in enumerate(self._options.header_correspondence, start=1):
                draft.assign(name, _group(match, index))
        return cursor + 1

    def _parse_body_and_footer(self, lines: list[str], draft: _CommitDraft) -> None:
        mode = _Mode.BODY
        field_name: Optional[str] = None
        note: Optional[_NoteDraft] = None

        for line in lines:
            field_match = self._field_re.search(line) if self._field_re is not None else None
            if field_match:
                field_name = field_match.group(1) or None
                continue

            if field_name is not None:
                draft.extra_fields[field_name] = _append_line(draft.extra_fields.get(field_name), line)
                if mode is _Mode.NOTE:
                    mode = _Mode.FOOTER
                continue

            note_match = self._notes_re.search(line)
            if note_match:
                note = _NoteDraft(title=note_match.group(1), text=note_match.group(2))
                draft.notes.append(note)
                draft.footer = _append_line(draft.footer, line)
                mode = _Mode.NOTE
                continue

            references = self.parse_references(line)
            if mode is _Mode.NOTE and note is not None:
                if references:
                    draft.references.extend(references)
                    mode = _Mode.FOOTER
                else:
                    note.text = _append_line(note.text, line)
                draft.footer = _append_line(draft.footer, line)
            elif references or mode is _Mode.FOOTER:
                draft.references.extend(references)
                draft.footer = _append_line(draft.footer, line)
                mode = _Mode.FOOTER
            else:
                draft.body = _append_line(draft.body, line)

    def _parse_breaking_header(self, draft: _CommitDraft) -> None:
        if self._breaking_header_re is None or draft.notes or not draft.header:
            return

        match = self._breaking_header_re.search(draft.header)
        if match:
            draft.notes.append(_NoteDraft(title=BREAKING_CHANGE_TITLE, text=_group(match, 3) or ""))

    def _parse_revert(self, raw: str) -> Optional[dict[str, Optional[str]]]:
        if self._revert_re is None:
            return None

        match = self._revert_re.search(raw)
        if not match:
            return None
        return {name: _group(match, index) for index, name in enumerate(self._options.revert_correspondence, start=1)}


def _build_reference(match: re.Match, action: Optional[str]) -> Reference:
    repository = match.group(1) or None
    owner = None
    if repository and "/" in repository:
        owner, repository = repository.split("/", 1)
        owner = owner or None
        repository = repository or None

    return Reference(
        action=action,
        owner=owner,
        repository=repository,
        prefix=match.group(2),
        issue=match.group(3),
        raw=match.group(0),
    )


def parse(raw: str, options: Optional[ParserOptions] = None) -> ParsedCommit:
    return CommitMessageParser(options).parse(raw)
