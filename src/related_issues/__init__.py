"""Related Issues - keep a table of tracker issues in pull request descriptions."""

__version__ = "0.3.0"
