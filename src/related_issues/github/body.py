"""Merge the managed issue table into a pull request description.

The managed region sits between START_MARKER and END_MARKER. A body with no
region gets the block appended; a body with one region gets it replaced.
Anything outside the region is left untouched. Bodies written by older
versions use the JIRA-ISSUE markers; their region is replaced by the new one.
"""

from __future__ import annotations

import re
from enum import Enum

from related_issues.exceptions import MalformedBodyError
from related_issues.github.renderer import END_MARKER, START_MARKER

LEGACY_START_MARKER = "<!--JIRA-ISSUE-START-->"
LEGACY_END_MARKER = "<!--JIRA-ISSUE-END-->"

_MARKER_PAIRS = (
    (START_MARKER, END_MARKER),
    (LEGACY_START_MARKER, LEGACY_END_MARKER),
)


class MergeMode(str, Enum):
    APPEND = "append"
    REPLACE = "replace"


def _region(body: str, start: str, end: str) -> re.Pattern[str] | None:
    """Return a pattern for the single ``start..end`` region, or None if absent."""
    starts, ends = body.count(start), body.count(end)
    if starts == 0 and ends == 0:
        return None
    if starts != 1 or ends != 1:
        raise MalformedBodyError(
            f"Expected one {start} ... {end} region, "
            f"found {starts} start and {ends} end marker(s)"
        )
    if body.index(end) < body.index(start):
        raise MalformedBodyError(f"{end} appears before {start}")
    return re.compile(re.escape(start) + r".*?" + re.escape(end), re.DOTALL)


def detect_mode(body: str | None) -> MergeMode:
    """Decide whether the block will be appended or will replace a region."""
    body = body or ""
    for start, end in _MARKER_PAIRS:
        if _region(body, start, end) is not None:
            return MergeMode.REPLACE
    return MergeMode.APPEND


def merge_body(body: str | None, block: str) -> str:
    """Return ``body`` with ``block`` appended or swapped into the managed region.

    Raises:
        MalformedBodyError: If markers are duplicated, unbalanced or out of order.
    """
    body = body or ""
    for start, end in _MARKER_PAIRS:
        pattern = _region(body, start, end)
        if pattern is not None:
            return pattern.sub(lambda _: block, body, count=1)
    return body + "\n" + block
