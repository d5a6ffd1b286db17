"""Read and update pull requests through the ``gh`` CLI.

``gh`` is preinstalled on GitHub-hosted runners and picks up the token from
``GH_TOKEN``.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass

from related_issues.exceptions import PullRequestError

logger = logging.getLogger("related_issues.github")

GH_TIMEOUT = 30


@dataclass
class PullRequest:
    number: int
    head_sha: str
    base_sha: str
    head_repo_full_name: str
    base_repo_full_name: str
    body: str = ""

    @property
    def is_cross_repository(self) -> bool:
        return self.head_repo_full_name != self.base_repo_full_name

    @classmethod
    def from_api(cls, data: dict) -> PullRequest:
        head = data.get("head") or {}
        base = data.get("base") or {}
        return cls(
            number=int(data["number"]),
            head_sha=head.get("sha", ""),
            base_sha=base.get("sha", ""),
            # head.repo is null when the fork was deleted
            head_repo_full_name=(head.get("repo") or {}).get("full_name", ""),
            base_repo_full_name=(base.get("repo") or {}).get("full_name", ""),
            body=data.get("body") or "",
        )


class PullRequestStore:
    """Pull request access for one ``owner/repo``."""

    def __init__(self, repository: str, token: str | None = None) -> None:
        self.repository = repository
        self.token = token

    def _gh(self, *args: str, stdin: str | None = None) -> str:
        env = dict(os.environ)
        if self.token:
            env["GH_TOKEN"] = self.token
        logger.debug("gh %s", " ".join(args[:3]))
        try:
            result = subprocess.run(
                ["gh", *args],
                input=stdin,
                capture_output=True,
                text=True,
                timeout=GH_TIMEOUT,
                env=env,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            raise PullRequestError(f"gh api call failed: {e}") from e

        if result.returncode != 0:
            raise PullRequestError(f"gh api call failed: {result.stderr.strip()}")
        return result.stdout

    def get_pull(self, number: int) -> PullRequest:
        output = self._gh("api", f"repos/{self.repository}/pulls/{number}")
        try:
            return PullRequest.from_api(json.loads(output))
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise PullRequestError(f"Unexpected response for pull request #{number}: {e}") from e

    def update_pull(self, number: int, body: str) -> None:
        self._gh(
            "api", "--method", "PATCH",
            f"repos/{self.repository}/pulls/{number}",
            "--input", "-",
            stdin=json.dumps({"body": body}),
        )
