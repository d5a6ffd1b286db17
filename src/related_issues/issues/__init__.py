"""Issue id extraction and aggregation."""

from related_issues.issues.aggregator import (
    IssueAggregate,
    aggregate,
    list_unique_issue_numbers,
)
from related_issues.issues.extractor import (
    GenericPattern,
    IssueExtractor,
    IssueReference,
    ProjectKeyPattern,
    create_extractor,
)

__all__ = [
    "GenericPattern",
    "IssueAggregate",
    "IssueExtractor",
    "IssueReference",
    "ProjectKeyPattern",
    "aggregate",
    "create_extractor",
    "list_unique_issue_numbers",
]
