"""Related issues exporter: the action's end-to-end pipeline.

For one pull request it:
1. Reads the pull request and refuses cross-repository (fork) diffs
2. Resolves the commits between the merge base and the head for a path
3. Extracts and deduplicates issue ids from their messages
4. Looks up each issue's title, one at a time
5. Renders the table and merges it into the description in a single update
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from related_issues.config import ActionConfig
from related_issues.exceptions import CrossRepositoryError
from related_issues.git.history import GitHistory, resolve_range
from related_issues.github.body import MergeMode, detect_mode, merge_body
from related_issues.github.pulls import PullRequest, PullRequestStore
from related_issues.github.renderer import (
    IssueInfo,
    render_issue_table,
    wrap_with_markers,
)
from related_issues.issues.aggregator import aggregate, list_unique_issue_numbers
from related_issues.issues.extractor import IssueExtractor, create_extractor
from related_issues.trackers.base import IssueTracker
from related_issues.trackers.factory import create_tracker
from related_issues.ui.console import GroupLog

logger = logging.getLogger("related_issues.exporter")

_RULE = "-------------------"


def _no_log(group: str, message: str) -> None:
    pass


def collect_issue_scopes(
    history: GitHistory,
    extractor: IssueExtractor,
    from_rev: str,
    to_rev: str,
    path: str = ".",
    log: GroupLog = _no_log,
) -> dict[str, set[str]]:
    """Issue numbers (with scopes) from the commits between two revisions.

    Without scope capture the keys are sorted; with it they keep the order
    in which they were first seen.
    """
    commits = resolve_range(history, from_rev, to_rev, path)

    group = "List commits"
    log(group, f"commits length: {len(commits)}")
    for commit in commits:
        log(group, f"{commit.hash} {commit.message}")

    if extractor.capture_scope:
        return aggregate(commits, extractor)
    return {number: set() for number in list_unique_issue_numbers(commits, extractor)}


@dataclass
class ExportResult:
    pr_number: int
    issues: list[IssueInfo] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    mode: MergeMode = MergeMode.APPEND
    body: str = ""


class RelatedIssuesExporter:
    """Collects related issues for a pull request and writes them to its body."""

    def __init__(
        self,
        pulls: PullRequestStore,
        history: GitHistory,
        tracker: IssueTracker,
        extractor: IssueExtractor,
        log: GroupLog = _no_log,
    ) -> None:
        self.pulls = pulls
        self.history = history
        self.tracker = tracker
        self.extractor = extractor
        self.log = log

    def collect_issue_scopes(self, from_rev: str, to_rev: str, path: str) -> dict[str, set[str]]:
        return collect_issue_scopes(
            self.history, self.extractor, from_rev, to_rev, path, log=self.log
        )

    async def lookup_issues(
        self, issue_scopes: dict[str, set[str]]
    ) -> tuple[list[IssueInfo], list[str]]:
        """Resolve titles sequentially. Failed lookups are logged and dropped."""
        infos: list[IssueInfo] = []
        failed: list[str] = []
        total = len(issue_scopes)

        group = "Get issue title for each issue number"
        for i, (issue_number, scopes) in enumerate(issue_scopes.items(), 1):
            try:
                summary = await self.tracker.find_issue(issue_number)
            except Exception as e:
                # a failed lookup drops the issue, not the run
                self.log(group, f"[{i}/{total}] Fail: [{issue_number}] {e}")
                logger.debug("lookup of %s failed", issue_number, exc_info=True)
                failed.append(issue_number)
                continue
            infos.append(IssueInfo(
                issue_number=issue_number,
                title=summary.title,
                link=summary.link,
                scopes=sorted(scopes),
            ))
            self.log(group, f"[{i}/{total}] Success: [{issue_number}] | {summary.title}")
        return infos, failed

    def _get_same_repo_pull(self, pr_number: int) -> PullRequest:
        pull = self.pulls.get_pull(pr_number)
        if pull.is_cross_repository:
            raise CrossRepositoryError(pull.head_repo_full_name, pull.base_repo_full_name)
        return pull

    async def export(self, pr_number: int, path: str = ".") -> ExportResult:
        """Run the full pipeline and update the pull request description."""
        pull = self._get_same_repo_pull(pr_number)
        mode = detect_mode(pull.body)
        self.log("Start", f"compute log from {pull.head_sha} to {pull.base_sha} for {path}")
        self.log("Start", f"issue titles from {self.tracker.name}, table will {mode.value}")

        issue_scopes = self.collect_issue_scopes(pull.head_sha, pull.base_sha, path)
        infos, failed = await self.lookup_issues(issue_scopes)

        table = render_issue_table(infos, with_scopes=self.extractor.capture_scope)
        new_body = merge_body(pull.body, wrap_with_markers(table))

        group = "Attach table"
        self._log_block(group, "Table", table)
        if mode is MergeMode.REPLACE:
            self.log(group, "Related issue table already exists, just replace")
        else:
            self.log(group, "Append related issue table")
        self._log_block(group, "Old body", pull.body)
        self._log_block(group, "New body", new_body)

        self.pulls.update_pull(pr_number, new_body)
        return ExportResult(
            pr_number=pr_number, issues=infos, failed=failed, mode=mode, body=new_body
        )

    def _log_block(self, group: str, title: str, text: str) -> None:
        banner = f"\n{_RULE}{title}{_RULE}\n"
        self.log(group, banner)
        self.log(group, text)
        self.log(group, banner)


async def run_action(
    config: ActionConfig, root: Path | str = ".", log: GroupLog = _no_log
) -> ExportResult:
    """Build all collaborators from configuration and export one pull request.

    Raises:
        RelatedIssuesError: On any fatal error; the description is left as is.
    """
    tracker = create_tracker(config)
    extractor = create_extractor(config.project_key, config.capture_scope)
    exporter = RelatedIssuesExporter(
        pulls=PullRequestStore(config.repository, config.github_token),
        history=GitHistory(root),
        tracker=tracker,
        extractor=extractor,
        log=log,
    )
    return await exporter.export(config.pr_number, config.path)
