"""Action inputs for the pull request labeler.

GitHub Actions exposes each ``with:`` input as an ``INPUT_<NAME>``
environment variable (upper-cased, spaces replaced by underscores). The
inputs are read and validated once; the core only ever sees the parsed
values.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from shared.constants import DEFAULT_API_BASE

_TASK_TYPES_ADAPTER = TypeAdapter(list[str])
_CUSTOM_LABELS_ADAPTER = TypeAdapter(dict[str, str])


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ActionConfig:
    task_types: tuple[str, ...]
    token: str = ""
    ticket_key_regex: Optional[str] = None
    add_label: bool = True
    custom_labels: Mapping[str, str] = field(default_factory=dict)
    repository: str = ""
    event_path: str = ""
    api_base: str = DEFAULT_API_BASE
    run_id: str = ""

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.repository.partition("/")[2]


def get_input(name: str, env: Optional[Mapping[str, str]] = None) -> str:
    source = os.environ if env is None else env
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return (source.get(key) or "").strip()


def parse_task_types(raw: str) -> tuple[str, ...]:
    if not raw:
        raise ConfigError("Missing required input: task_types")
    try:
        return tuple(_TASK_TYPES_ADAPTER.validate_json(raw))
    except ValidationError as exc:
        raise ConfigError("Invalid task_types input. Expecting a JSON array.") from exc


def parse_custom_labels(raw: str) -> dict[str, str]:
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("Invalid custom_labels input. Unable to parse JSON.") from exc
    try:
        return _CUSTOM_LABELS_ADAPTER.validate_python(decoded, strict=True)
    except ValidationError as exc:
        raise ConfigError(
            "Invalid custom_labels input. Expecting a JSON object with string keys and values."
        ) from exc


def parse_ticket_key_regex(raw: str) -> Optional[str]:
    if not raw:
        return None
    try:
        re.compile(raw)
    except re.error as exc:
        raise ConfigError(f"Invalid ticket_key_regex input: {exc}") from exc
    return raw


def parse_add_label(raw: str) -> bool:
    return raw.lower() != "false"


def load_config(env: Optional[Mapping[str, str]] = None) -> ActionConfig:
    source = os.environ if env is None else env
    add_label = parse_add_label(get_input("add_label", source))
    return ActionConfig(
        task_types=parse_task_types(get_input("task_types", source)),
        token=get_input("token", source) or source.get("GITHUB_TOKEN", ""),
        ticket_key_regex=parse_ticket_key_regex(get_input("ticket_key_regex", source)),
        add_label=add_label,
        # custom labels only matter when labels are applied
        custom_labels=parse_custom_labels(get_input("custom_labels", source)) if add_label else {},
        repository=source.get("GITHUB_REPOSITORY", ""),
        event_path=source.get("GITHUB_EVENT_PATH", ""),
        api_base=source.get("GITHUB_API_URL") or DEFAULT_API_BASE,
        run_id=source.get("GITHUB_RUN_ID", ""),
    )
