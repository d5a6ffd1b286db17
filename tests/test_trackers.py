"""Tests for issue tracker adapters."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from requests.auth import HTTPBasicAuth

from related_issues.config import ActionConfig, JiraConfig
from related_issues.exceptions import ConfigError, TrackerError
from related_issues.trackers.factory import create_tracker
from related_issues.trackers.jira import JiraTracker


def _response(status: int, payload=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.text = text
    response.json.return_value = payload
    return response


@pytest.fixture
def jira_config() -> JiraConfig:
    return JiraConfig(host="acme.atlassian.net", username="bot@acme.io", token="secret")


class TestJiraTracker:
    @pytest.mark.asyncio
    async def test_find_issue(self, jira_config):
        session = MagicMock()
        session.headers = {}
        session.get.return_value = _response(200, {"key": "ABC-1", "fields": {"summary": "Login bug"}})

        tracker = JiraTracker(jira_config, session=session)
        summary = await tracker.find_issue("ABC-1")

        assert summary.title == "Login bug"
        assert summary.link == "https://acme.atlassian.net/browse/ABC-1"
        args, kwargs = session.get.call_args
        assert args[0] == "https://acme.atlassian.net/rest/api/2/issue/ABC-1"
        assert kwargs["params"] == {"fields": "summary"}

    def test_basic_auth(self, jira_config):
        session = MagicMock()
        session.headers = {}
        JiraTracker(jira_config, session=session)
        assert session.auth == HTTPBasicAuth("bot@acme.io", "secret")
        assert session.headers["Accept"] == "application/json"

    def test_http_protocol_links(self):
        config = JiraConfig(protocol="http", host="jira.local/", username="u", token="t")
        tracker = JiraTracker(config, session=MagicMock(headers={}))
        assert tracker.browse_url("ABC-1") == "http://jira.local/browse/ABC-1"

    @pytest.mark.asyncio
    async def test_not_found(self, jira_config):
        session = MagicMock(headers={})
        session.get.return_value = _response(404, text='{"errorMessages":["Issue Does Not Exist"]}')
        with pytest.raises(TrackerError, match="404"):
            await JiraTracker(jira_config, session=session).find_issue("ABC-404")

    @pytest.mark.asyncio
    async def test_connection_error(self, jira_config):
        session = MagicMock(headers={})
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TrackerError, match="refused"):
            await JiraTracker(jira_config, session=session).find_issue("ABC-1")

    @pytest.mark.asyncio
    async def test_missing_summary(self, jira_config):
        session = MagicMock(headers={})
        session.get.return_value = _response(200, {"fields": {}})
        with pytest.raises(TrackerError):
            await JiraTracker(jira_config, session=session).find_issue("ABC-1")


class TestFactory:
    def test_creates_jira(self, jira_config):
        config = ActionConfig(tracker="jira", jira=jira_config, pr_number=1, repository="a/b")
        assert isinstance(create_tracker(config), JiraTracker)

    def test_jira_without_settings(self):
        config = ActionConfig(tracker="jira", pr_number=1, repository="a/b")
        with pytest.raises(ConfigError):
            create_tracker(config)

    def test_unknown_tracker(self):
        config = ActionConfig(tracker="linear", pr_number=1, repository="a/b")
        with pytest.raises(ConfigError, match="Unsupported tracker"):
            create_tracker(config)
