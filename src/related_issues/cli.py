"""Command-line interface for Related Issues."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path

import click

from related_issues import __version__
from related_issues.exceptions import RelatedIssuesError
from related_issues.ui.console import Console, GroupLogger

console = Console()
logger = logging.getLogger("related_issues.cli")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _set_output(name: str, value: str) -> None:
    """Write a step output for later workflow steps, if running in Actions."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a") as f:
        f.write(f"{name}={value}\n")


@click.group()
@click.version_option(version=__version__, prog_name="related-issues")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Related Issues - keep a table of tracker issues in pull request descriptions."""
    _setup_logging(verbose)


@main.command()
@click.option(
    "--root", "-r", default=".", type=click.Path(file_okay=False),
    help="Git working tree to read history from.",
)
def run(root: str):
    """Update the pull request description (GitHub Action entry point).

    Configuration comes from the action inputs (INPUT_* environment
    variables) and the triggering pull_request event.
    """
    from related_issues.config import load_action_config
    from related_issues.exporter import run_action

    log = GroupLogger(console)
    success = False
    try:
        config = load_action_config()
        result = asyncio.run(run_action(config, Path(root), log=log))
        success = True
    except RelatedIssuesError as e:
        log.close()
        console.raw(f"::error::{e}")
        console.error(str(e))
    except Exception as e:
        log.close()
        logger.debug("unexpected failure", exc_info=True)
        console.raw(f"::error::Unexpected error: {e!r}")
        console.error(f"Unexpected error: {e!r}")
    else:
        log.close()
        console.success(
            f"Updated pull request #{result.pr_number} "
            f"({len(result.issues)} issue(s), {result.mode.value})"
        )
        if result.failed:
            console.warning(f"Could not look up: {', '.join(result.failed)}")
    finally:
        _set_output("success", "true" if success else "false")

    if not success:
        sys.exit(1)


@main.command()
@click.option("--from", "from_rev", default="HEAD", help="Revision the commits lead to (PR head).")
@click.option("--to", "to_rev", default="main", help="Revision to diff against (PR base).")
@click.option("--path", "-p", "path_filter", default=".", help="Only commits touching this path.")
@click.option(
    "--root", "-r", default=".", type=click.Path(exists=True, file_okay=False),
    help="Git working tree to read history from.",
)
@click.option("--project-key", "-k", default=None, help="Only match ids of this project (e.g. ABC).")
@click.option("--capture-scope", is_flag=True, help="Collect conventional-commit scopes.")
def preview(
    from_rev: str,
    to_rev: str,
    path_filter: str,
    root: str,
    project_key: str | None,
    capture_scope: bool,
):
    """List the issue ids a pull request would link, without calling any API."""
    from related_issues.exporter import collect_issue_scopes
    from related_issues.git.history import GitHistory
    from related_issues.issues.extractor import create_extractor

    console.banner()
    try:
        extractor = create_extractor(project_key, capture_scope)
        issues = collect_issue_scopes(
            GitHistory(root), extractor, from_rev, to_rev, path_filter,
            log=lambda group, message: console.raw(message),
        )
    except RelatedIssuesError as e:
        console.error(str(e))
        sys.exit(1)

    if not issues:
        console.info("No issue ids found in the selected commits.")
        return
    console.show_issues(issues, with_scopes=capture_scope)


if __name__ == "__main__":
    main()
