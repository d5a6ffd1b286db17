"""Markdown renderer for the related issues table.

Cell contents are written as-is. A ``|`` inside a title splits the cell,
same as any hand-written markdown table.
"""

from __future__ import annotations

from dataclasses import dataclass, field

START_MARKER = "<!--RELATED-ISSUE-START-->"
END_MARKER = "<!--RELATED-ISSUE-END-->"
TABLE_HEADING = "## Related Issues (Auto updated)"


@dataclass
class IssueInfo:
    """One row of the rendered table."""
    issue_number: str
    title: str
    link: str
    scopes: list[str] = field(default_factory=list)

    @property
    def issue_cell(self) -> str:
        return f"[{self.issue_number}]({self.link})"


def render_table(headers: list[str], rows: list[list[str]]) -> str:
    """Render a pipe-delimited markdown table."""

    def wrap(cells: list[str]) -> str:
        return "|" + "|".join(cells) + "|"

    lines = [wrap(headers), wrap(["---"] * len(headers))]
    lines.extend(wrap(row) for row in rows)
    return "\n".join(lines)


def render_issue_table(issues: list[IssueInfo], with_scopes: bool = False) -> str:
    """Render resolved issues; adds a Scopes column when scope capture is on."""
    if with_scopes:
        headers = ["Issue", "Title", "Scopes"]
        rows = [[i.issue_cell, i.title, ", ".join(i.scopes)] for i in issues]
    else:
        headers = ["Issue", "Title"]
        rows = [[i.issue_cell, i.title] for i in issues]
    return render_table(headers, rows)


def wrap_with_markers(table: str) -> str:
    """Surround a table with the markers that make it replaceable later."""
    return "\n".join([START_MARKER, TABLE_HEADING, table, END_MARKER])
