"""Issue tracker abstraction layer."""

from related_issues.trackers.base import IssueSummary, IssueTracker
from related_issues.trackers.factory import create_tracker

__all__ = ["IssueSummary", "IssueTracker", "create_tracker"]
