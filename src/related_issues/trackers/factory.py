"""Factory for creating issue trackers from configuration."""

from __future__ import annotations

from related_issues.config import ActionConfig
from related_issues.exceptions import ConfigError
from related_issues.trackers.base import IssueTracker


def create_tracker(config: ActionConfig) -> IssueTracker:
    """Create the tracker adapter selected by ``config.tracker``.

    Raises:
        ConfigError: If the tracker is unknown or its settings are missing.
    """
    tracker = config.tracker.lower()

    if tracker == "jira":
        from related_issues.trackers.jira import JiraTracker

        if config.jira is None:
            raise ConfigError("The jira tracker needs jira-host, jira-username and jira-token")
        return JiraTracker(config.jira)
    else:
        raise ConfigError(
            f"Unsupported tracker: '{tracker}'. Supported trackers: jira"
        )
