"""Configuration management for the Related Issues action.

GitHub Actions passes ``with:`` inputs as ``INPUT_<NAME>`` environment
variables (name upper-cased, hyphens kept). Everything is read and validated
here, before any side effect happens.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from related_issues.exceptions import ConfigError

SUPPORTED_TRACKERS = ("jira",)
SUPPORTED_PROTOCOLS = ("http", "https")

_TRUE_VALUES = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off", ""}


class JiraConfig(BaseModel):
    """Jira REST client configuration."""

    protocol: Literal["http", "https"] = "https"
    host: str
    username: str
    token: str = Field(repr=False)

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host.rstrip('/')}"


class ActionConfig(BaseModel):
    """Full configuration of one action run."""

    tracker: str = "jira"
    jira: JiraConfig | None = None
    path: str = "."
    project_key: str | None = None
    capture_scope: bool = False
    pr_number: int
    repository: str
    github_token: str | None = Field(default=None, repr=False)


def get_input(
    env: Mapping[str, str], name: str, required: bool = False, default: str = ""
) -> str:
    """Read an action input the way ``@actions/core`` does.

    Composite actions can't always export hyphenated variable names, so
    ``INPUT_JIRA_HOST`` is accepted as well as ``INPUT_JIRA-HOST``.
    """
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    value = env.get(key, "") or env.get(key.replace("-", "_"), "")
    value = value.strip()
    if required and not value:
        raise ConfigError(f"Input required and not supplied: {name}")
    return value or default


def parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Input '{name}' must be a boolean (true or false), got: {value!r}")


def read_pr_number(event_path: str | None) -> int:
    """Read the pull request number from the triggering event payload."""
    if not event_path or not Path(event_path).exists():
        raise ConfigError("GITHUB_EVENT_PATH is not set; run this action from a workflow")

    try:
        event = json.loads(Path(event_path).read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"Can't parse event payload at {event_path}: {e}") from e

    number = (event.get("pull_request") or {}).get("number")
    if not number:
        raise ConfigError("Unexpected event: this action only runs on pull_request events")
    return int(number)


def load_action_config(env: Mapping[str, str] | None = None) -> ActionConfig:
    """Build an ActionConfig from action inputs and the workflow environment.

    Raises:
        ConfigError: On a missing input, unsupported tracker or protocol,
            or a non pull request event.
    """
    env = os.environ if env is None else env

    tracker = get_input(env, "tracker", required=True).lower()
    if tracker not in SUPPORTED_TRACKERS:
        raise ConfigError(
            f"Unsupported tracker: '{tracker}'. "
            f"Supported trackers: {', '.join(SUPPORTED_TRACKERS)}"
        )

    jira = None
    if tracker == "jira":
        protocol = get_input(env, "jira-protocol", default="https").lower()
        if protocol not in SUPPORTED_PROTOCOLS:
            raise ConfigError("Unexpected jira-protocol. It should be http or https")
        jira = JiraConfig(
            protocol=protocol,
            host=get_input(env, "jira-host", required=True),
            username=get_input(env, "jira-username", required=True),
            token=get_input(env, "jira-token", required=True),
        )

    repository = env.get("GITHUB_REPOSITORY", "")
    if "/" not in repository:
        raise ConfigError("GITHUB_REPOSITORY must be set as 'owner/repo'")

    return ActionConfig(
        tracker=tracker,
        jira=jira,
        path=get_input(env, "path", default="."),
        project_key=get_input(env, "project-key") or None,
        capture_scope=parse_bool("capture-scope", get_input(env, "capture-scope")),
        pr_number=read_pr_number(env.get("GITHUB_EVENT_PATH")),
        repository=repository,
        github_token=get_input(env, "github-token") or env.get("GITHUB_TOKEN") or None,
    )
