"""Issue reference extractor: find tracker ids like ``ABC-123`` in commit text.

Matching is line oriented. Each line of a commit message is matched on its
own, so bodies such as "Fixes ABC-1, ABC-2" yield every id in order without
a real parser.

Two matching strategies are available:
  1. ProjectKeyPattern: ``<KEY>-<digits>`` for one configured project key,
     case-insensitive, emitted upper-case.
  2. GenericPattern: any ``<letter><letters/digits>-<digits>`` token on the
     upper-cased line.

They match different sets of tokens and stay separate strategies.

When scope capture is on, a line shaped like a conventional commit header
(``fix(auth): ...``) attaches its parenthesised scope to every id found on
that line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from related_issues.exceptions import ConfigError

# `type(scope)!: rest` with scope and "!" optional, matched on the original-case line
_CONVENTIONAL_HEADER = re.compile(r"^\s*\w+(?:\(([^)]*)\))?!?:\s*")


@dataclass(frozen=True)
class IssueReference:
    """An issue id found in commit text, with the conventional-commit scope of its line."""
    issue_number: str
    scope: str | None = None


class IssuePattern(Protocol):
    def find(self, line: str) -> list[str]:
        """Return upper-case issue ids in ``line``, first to last."""
        ...


class GenericPattern:
    """Match any ``PREFIX-NUMBER`` token whose prefix starts with a letter."""

    regex = re.compile(r"[A-Z][A-Z0-9]*-\d+")

    def find(self, line: str) -> list[str]:
        return self.regex.findall(line.upper())


class ProjectKeyPattern:
    """Match ``<KEY>-NUMBER`` for a single project key."""

    def __init__(self, project_key: str) -> None:
        key = project_key.strip().upper()
        if not key:
            raise ConfigError("Project key must not be blank")
        self.project_key = key
        self.regex = re.compile(rf"{re.escape(key)}-\d+", re.IGNORECASE)

    def find(self, line: str) -> list[str]:
        return [m.upper() for m in self.regex.findall(line)]


def conventional_scope(line: str) -> str | None:
    """Return the scope of a ``type(scope): ...`` header line, if any."""
    match = _CONVENTIONAL_HEADER.match(line)
    if not match:
        return None
    scope = (match.group(1) or "").strip()
    return scope or None


class IssueExtractor:
    """Turn commit text into an ordered list of IssueReference."""

    def __init__(self, pattern: IssuePattern, capture_scope: bool = False) -> None:
        self.pattern = pattern
        self.capture_scope = capture_scope

    def extract(self, text: str) -> list[IssueReference]:
        refs: list[IssueReference] = []
        for line in text.splitlines():
            issue_numbers = self.pattern.find(line)
            if not issue_numbers:
                continue
            scope = conventional_scope(line) if self.capture_scope else None
            refs.extend(IssueReference(number, scope) for number in issue_numbers)
        return refs


def create_extractor(
    project_key: str | None = None, capture_scope: bool = False
) -> IssueExtractor:
    """Build an extractor from configuration.

    Args:
        project_key: Restrict matches to this tracker project. ``None`` or
            empty selects the generic pattern.
        capture_scope: Attach conventional-commit scopes to references.
    """
    pattern: IssuePattern
    if project_key:
        pattern = ProjectKeyPattern(project_key)
    else:
        pattern = GenericPattern()
    return IssueExtractor(pattern, capture_scope=capture_scope)
