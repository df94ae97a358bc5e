from typing import Optional

from pydantic import BaseModel, ConfigDict


class Note(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str
    """Keyword as written in the message, e.g. ``BREAKING CHANGE``."""
    text: str


class Reference(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Optional[str]
    owner: Optional[str]
    repository: Optional[str]
    prefix: str
    issue: str
    raw: str


class ParsedCommit(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    merge: Optional[str] = None
    header: Optional[str] = None
    type: Optional[str] = None
    scope: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    footer: Optional[str] = None
    notes: tuple[Note, ...] = ()
    references: tuple[Reference, ...] = ()
    mentions: tuple[str, ...] = ()
    revert: Optional[dict[str, Optional[str]]] = None
    extra_fields: dict[str, Optional[str]] = {}
    """Values captured by ``-name-`` field lines and custom correspondences."""


class ClassificationResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str
    scope: str = ""
    breaking: bool = False
