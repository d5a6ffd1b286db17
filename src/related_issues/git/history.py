"""Git history reader: resolve the commits a pull request brings in.

Given the head and base revisions of a pull request, find their merge base
and list the commits between that ancestor and the head which touched a
path. This is the input layer for the issue extractor.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from related_issues.exceptions import RevisionNotFoundError

logger = logging.getLogger("related_issues.git")

# Unit/record separators keep multi-line commit bodies intact.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"--format=%H{_FIELD_SEP}%s{_FIELD_SEP}%b{_RECORD_SEP}"

GIT_TIMEOUT = 60


@dataclass(frozen=True)
class Commit:
    """A commit as read from history."""
    hash: str
    message: str
    body: str = ""

    @property
    def text(self) -> str:
        """Subject and body joined by a newline, as scanned for issue ids."""
        if self.body:
            return f"{self.message}\n{self.body}"
        return self.message


class GitHistory:
    """Thin reader over the ``git`` binary for a single working tree."""

    def __init__(self, root: Path | str = ".") -> None:
        self.root = Path(root)

    def _git(self, *args: str) -> subprocess.CompletedProcess[str]:
        logger.debug("git %s", " ".join(args))
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise RevisionNotFoundError(
                f"git {args[0]} timed out after {GIT_TIMEOUT}s"
            ) from e
        except OSError as e:
            raise RevisionNotFoundError(f"git is not available: {e}") from e

    def merge_base(self, rev_a: str, rev_b: str) -> str:
        """Return the best common ancestor of two revisions."""
        result = self._git("merge-base", rev_a, rev_b)
        if result.returncode != 0:
            detail = result.stderr.strip() or "no common ancestor"
            raise RevisionNotFoundError(
                f"Can't find merge base of {rev_a} and {rev_b}: {detail}"
            )
        return result.stdout.strip()

    def log(self, from_rev: str, to_rev: str, path_filter: str = ".") -> list[Commit]:
        """List commits reachable from ``from_rev`` but not ``to_rev`` touching ``path_filter``.

        Commits come back most-recent-first, as ``git log`` walks them.
        """
        result = self._git("log", _LOG_FORMAT, f"{to_rev}..{from_rev}", "--", path_filter)
        if result.returncode != 0:
            raise RevisionNotFoundError(
                f"Can't read log from {from_rev} to {to_rev}: {result.stderr.strip()}"
            )
        return parse_log(result.stdout)


def parse_log(output: str) -> list[Commit]:
    """Parse ``git log`` output written with the separator format above."""
    commits: list[Commit] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        parts = record.split(_FIELD_SEP)
        if len(parts) < 3:
            continue
        hash_, message, body = parts[0], parts[1], _FIELD_SEP.join(parts[2:])
        commits.append(Commit(hash=hash_.strip(), message=message, body=body.strip()))
    return commits


def resolve_range(
    history: GitHistory, from_rev: str, to_rev: str, path_filter: str = "."
) -> list[Commit]:
    """List the commits between the merge base of two revisions and ``from_rev``.

    Returns an empty list when ``from_rev`` is itself the common ancestor.

    Raises:
        RevisionNotFoundError: If either revision can't be resolved.
    """
    ancestor = history.merge_base(from_rev, to_rev)
    return history.log(from_rev, ancestor, path_filter)
