"""Commit history access."""

from related_issues.git.history import Commit, GitHistory, resolve_range

__all__ = ["Commit", "GitHistory", "resolve_range"]
