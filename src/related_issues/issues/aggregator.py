"""Fold issue references from many commits into one deduplicated set."""

from __future__ import annotations

from collections.abc import Iterable

from related_issues.git.history import Commit
from related_issues.issues.extractor import IssueExtractor

IssueAggregate = dict[str, set[str]]


def aggregate(commits: Iterable[Commit], extractor: IssueExtractor) -> IssueAggregate:
    """Map every issue number found in ``commits`` to the scopes seen with it.

    Issue numbers keep the order in which they were first seen. Scopes only
    ever accumulate; an issue seen without any scope maps to an empty set.
    """
    result: IssueAggregate = {}
    for commit in commits:
        for ref in extractor.extract(commit.text):
            scopes = result.setdefault(ref.issue_number, set())
            if ref.scope:
                scopes.add(ref.scope)
    return result


def list_unique_issue_numbers(
    commits: Iterable[Commit], extractor: IssueExtractor
) -> list[str]:
    """Deduplicated issue numbers in lexicographic order (no scope tracking)."""
    return sorted(aggregate(commits, extractor))
