"""Shared test fixtures for Related Issues."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from related_issues.git.history import Commit
from related_issues.github.pulls import PullRequest
from related_issues.exceptions import TrackerError
from related_issues.trackers.base import IssueSummary, IssueTracker

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


class GitRepo:
    """Small helper to script a throwaway repository."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def git(self, *args: str) -> str:
        env = {**os.environ, **GIT_ENV}
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            env=env,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, path: str, message: str, content: str | None = None) -> str:
        file_path = self.root / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        previous = file_path.read_text() if file_path.exists() else ""
        file_path.write_text(previous + (content or message) + "\n")
        self.git("add", path)
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    """A repository on ``main`` with one base commit, and a ``feature`` branch.

    Layout of ``feature`` on top of ``main``:
        fix(auth): ABC-12 login bug          (services/api)
        ABC-12 follow-up; also ABC-7         (services/api)
        docs: XYZ-3 readme                    (docs)
    ``main`` then gets one more commit (ABC-99) after the branch point.
    """
    repo = GitRepo(tmp_path)
    repo.git("init", "-q")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    repo.commit("README.md", "initial commit")
    repo.git("checkout", "-q", "-b", "feature")
    repo.commit("services/api/auth.py", "fix(auth): ABC-12 login bug")
    repo.commit("services/api/auth.py", "ABC-12 follow-up; also ABC-7")
    repo.commit("docs/index.md", "docs: XYZ-3 readme")
    repo.git("checkout", "-q", "main")
    repo.commit("services/api/other.py", "ABC-99 on main only")
    return repo


class FakeTracker(IssueTracker):
    """In-memory tracker; ids listed in ``failing`` raise TrackerError."""

    name = "fake"

    def __init__(self, titles: dict[str, str] | None = None, failing: set[str] | None = None):
        self.titles = titles or {}
        self.failing = failing or set()
        self.calls: list[str] = []

    async def find_issue(self, issue_number: str) -> IssueSummary:
        self.calls.append(issue_number)
        if issue_number in self.failing:
            raise TrackerError(f"Issue Does Not Exist: {issue_number}")
        title = self.titles.get(issue_number, f"Title of {issue_number}")
        return IssueSummary(title=title, link=f"https://jira.example.com/browse/{issue_number}")


class FakePullStore:
    """Records reads and writes instead of talking to GitHub."""

    def __init__(self, pull: PullRequest):
        self.pull = pull
        self.get_calls = 0
        self.updates: list[tuple[int, str]] = []

    def get_pull(self, number: int) -> PullRequest:
        self.get_calls += 1
        return self.pull

    def update_pull(self, number: int, body: str) -> None:
        self.updates.append((number, body))


class FakeHistory:
    """History stub returning fixed commits; counts calls."""

    def __init__(self, commits: list[Commit], ancestor: str = "base0"):
        self.commits = commits
        self.ancestor = ancestor
        self.calls: list[tuple] = []

    def merge_base(self, rev_a: str, rev_b: str) -> str:
        self.calls.append(("merge_base", rev_a, rev_b))
        return self.ancestor

    def log(self, from_rev: str, to_rev: str, path_filter: str = ".") -> list[Commit]:
        self.calls.append(("log", from_rev, to_rev, path_filter))
        return list(self.commits)


@pytest.fixture
def sample_commits() -> list[Commit]:
    return [
        Commit(hash="c3", message="fix(auth): ABC-12 login bug"),
        Commit(hash="c2", message="ABC-12 follow-up; also ABC-7"),
    ]


@pytest.fixture
def same_repo_pull() -> PullRequest:
    return PullRequest(
        number=42,
        head_sha="head1",
        base_sha="base1",
        head_repo_full_name="acme/app",
        base_repo_full_name="acme/app",
        body="desc",
    )
