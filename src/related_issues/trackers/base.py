"""Base issue tracker interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class IssueSummary(BaseModel):
    """What the action needs to know about one issue."""

    title: str
    link: str


class IssueTracker(ABC):
    """Abstract base for issue tracker adapters."""

    name: str = ""

    @abstractmethod
    async def find_issue(self, issue_number: str) -> IssueSummary:
        """Look up a single issue by its id (e.g. ``ABC-123``).

        Raises:
            TrackerError: If the issue can't be fetched.
        """
        ...
