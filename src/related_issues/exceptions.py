"""Custom exceptions for Related Issues."""


class RelatedIssuesError(Exception):
    """Base exception for all Related Issues errors."""


class ConfigError(RelatedIssuesError):
    """Missing or invalid action configuration."""


class RevisionNotFoundError(RelatedIssuesError):
    """A git revision could not be resolved, or two revisions share no ancestor."""


class CrossRepositoryError(RelatedIssuesError):
    """Raised for pull requests whose head lives in another repository (forks)."""

    def __init__(self, head_repo: str, base_repo: str):
        super().__init__(
            f"Can't get diff across repositories: head is '{head_repo}', "
            f"base is '{base_repo}'"
        )
        self.head_repo = head_repo
        self.base_repo = base_repo


class TrackerError(RelatedIssuesError):
    """Issue tracker lookup errors."""


class PullRequestError(RelatedIssuesError):
    """Reading or updating a pull request failed."""


class MalformedBodyError(RelatedIssuesError):
    """The pull request body holds an ambiguous or broken marker region."""
