"""Jira issue tracker (REST API v2, basic auth)."""

from __future__ import annotations

import asyncio
import logging

import requests
from requests.auth import HTTPBasicAuth

from related_issues.config import JiraConfig
from related_issues.exceptions import TrackerError
from related_issues.trackers.base import IssueSummary, IssueTracker

logger = logging.getLogger("related_issues.trackers.jira")

REQUEST_TIMEOUT = 30


class JiraTracker(IssueTracker):
    """Look up issue titles on a Jira server or Jira Cloud site."""

    name = "jira"

    def __init__(self, config: JiraConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session or requests.Session()
        self._session.auth = HTTPBasicAuth(config.username, config.token)
        self._session.headers.update({"Accept": "application/json"})

    def issue_url(self, issue_number: str) -> str:
        return f"{self.config.base_url}/rest/api/2/issue/{issue_number}"

    def browse_url(self, issue_number: str) -> str:
        return f"{self.config.base_url}/browse/{issue_number}"

    def _fetch(self, issue_number: str) -> dict:
        url = self.issue_url(issue_number)
        logger.debug("GET %s", url)
        try:
            response = self._session.get(
                url, params={"fields": "summary"}, timeout=REQUEST_TIMEOUT
            )
        except requests.RequestException as e:
            raise TrackerError(f"Request to Jira failed for {issue_number}: {e}") from e

        if response.status_code != 200:
            raise TrackerError(
                f"Jira returned {response.status_code} for {issue_number}: "
                f"{response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise TrackerError(f"Jira returned invalid JSON for {issue_number}") from e

    async def find_issue(self, issue_number: str) -> IssueSummary:
        data = await asyncio.to_thread(self._fetch, issue_number)
        summary = (data.get("fields") or {}).get("summary")
        if summary is None:
            raise TrackerError(f"Jira issue {issue_number} has no summary field")
        return IssueSummary(title=summary, link=self.browse_url(issue_number))
