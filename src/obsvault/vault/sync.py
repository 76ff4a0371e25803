"""Synchronize the vault root with its git remote."""

import logging

from obsvault.core.errors import GitError, SyncError
from obsvault.core.git import DEFAULT_BRANCH, GitClient
from obsvault.core.types import NullReporter, ProgressReporter, SyncResult

logger = logging.getLogger(__name__)


def push_vault(
    git: GitClient, reporter: ProgressReporter | None = None, force: bool = False
) -> SyncResult:
    """Commit all local changes and push them.

    Without changes nothing happens unless force is set. A commit that git
    refuses (nothing staged) ends the push quietly.

    Raises:
        SyncError: If checking, staging or pushing fails.
    """
    reporter = reporter or NullReporter()

    reporter.info("Checking for changes...")
    try:
        has_changes = git.has_changes()
    except GitError as e:
        reporter.error(str(e))
        raise SyncError(str(e)) from e

    if not has_changes and not force:
        reporter.info("No changes to add")
        return SyncResult(action="push", changed=False, message="No changes to add")

    reporter.info("Adding changes...")
    try:
        git.add_all()
    except GitError as e:
        reporter.error(str(e))
        raise SyncError(str(e)) from e
    reporter.success("Changes added")

    reporter.info("Creating commit...")
    try:
        git.commit()
    except GitError as e:
        logger.debug(f"Commit refused: {e}")
        reporter.info("No changes to commit")
        return SyncResult(action="push", changed=False, message="No changes to commit")
    reporter.success("Commit created")

    reporter.info("Pushing to GitHub...")
    try:
        git.push()
    except GitError as e:
        reporter.error("Unable to connect to GitHub")
        reporter.error("Check your internet connection and try again")
        raise SyncError(f"Push failed: {e}") from e
    reporter.success("Push successful!")

    reporter.success("Synchronization completed!")
    return SyncResult(action="push")


def pull_vault(
    git: GitClient,
    reporter: ProgressReporter | None = None,
    branch: str = DEFAULT_BRANCH,
) -> SyncResult:
    """Fetch and pull the remote branch into the vault root.

    Raises:
        SyncError: If the checkout is on another branch, fetching or pulling
            fails. Merge conflicts are listed and carried on the error.
    """
    reporter = reporter or NullReporter()

    reporter.info("Checking current branch...")
    try:
        current = git.current_branch()
    except GitError as e:
        reporter.error(str(e))
        raise SyncError(str(e)) from e

    if current != branch:
        message = f"You are not on the {branch} branch (current branch: {current})"
        reporter.error(message)
        raise SyncError(message)

    reporter.info("Checking remote changes...")
    try:
        git.fetch()
    except GitError as e:
        reporter.error("Error while checking for changes")
        raise SyncError(str(e)) from e
    reporter.success("Check completed")

    reporter.info("Fetching changes...")
    try:
        git.pull()
    except GitError as e:
        if not e.is_conflict:
            reporter.error(str(e))
            raise SyncError(str(e)) from e

        reporter.error("Conflicts detected!")
        try:
            conflicts = git.list_conflicts()
        except GitError as list_error:
            reporter.error("Unable to list conflicts")
            raise SyncError(str(list_error)) from e

        reporter.info("Conflicting files:")
        for path in conflicts:
            reporter.info(f"  - {path}")
        reporter.info("Resolve conflicts manually and commit changes")
        raise SyncError("Pull stopped on merge conflicts", conflicts=conflicts) from e

    reporter.success("Pull successful!")
    reporter.success("Synchronization completed!")
    return SyncResult(action="pull")
