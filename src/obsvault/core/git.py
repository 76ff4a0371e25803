"""Git capability used by push and pull.

Vault synchronization talks to git through the GitClient protocol so that it
can be exercised without a git binary. SubprocessGit is the real
implementation and shells out to `git` inside the vault root.
"""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Protocol

from obsvault.core.errors import GitError

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
DEFAULT_REMOTE = "origin"
COMMIT_TIME_FORMAT = "%d-%m-%Y_%H:%M:%S"


class GitClient(Protocol):
    """Operations the vault sync commands need from git."""

    def current_branch(self) -> str: ...

    def fetch(self) -> None: ...

    def pull(self) -> None: ...

    def push(self) -> None: ...

    def add_all(self) -> None: ...

    def commit(self, message: str | None = None) -> None: ...

    def has_changes(self) -> bool: ...

    def list_conflicts(self) -> list[str]: ...


def default_commit_message(now: datetime | None = None) -> str:
    """Timestamp used as the commit message, e.g. 28-01-2024_14:03:59."""
    return (now or datetime.now()).strftime(COMMIT_TIME_FORMAT)


class SubprocessGit:
    """GitClient backed by the git command line."""

    def __init__(
        self,
        repo_path: Path | str,
        remote: str = DEFAULT_REMOTE,
        branch: str = DEFAULT_BRANCH,
    ):
        self.repo_path = Path(repo_path)
        self.remote = remote
        self.branch = branch

    def _run(self, *args: str, action: str) -> str:
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)} in {self.repo_path}")
        try:
            result = subprocess.run(
                command,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found", command=command) from e
        except OSError as e:
            raise GitError(f"error while {action}: {e}", command=command) from e

        if result.returncode != 0:
            output = "\n".join(
                part.strip() for part in (result.stdout, result.stderr) if part
            )
            logger.debug(f"git exited with {result.returncode}: {output[:200]}")
            raise GitError(
                f"error while {action}: {output or f'exit status {result.returncode}'}",
                command=command,
                returncode=result.returncode,
                output=output,
            )
        return result.stdout

    def current_branch(self) -> str:
        return self._run(
            "branch", "--show-current", action="getting current branch"
        ).strip()

    def fetch(self) -> None:
        self._run("fetch", self.remote, self.branch, action="fetching")

    def pull(self) -> None:
        self._run("pull", self.remote, self.branch, action="pulling")

    def push(self) -> None:
        self._run("push", "--quiet", self.remote, self.branch, action="pushing")

    def add_all(self) -> None:
        self._run("add", ".", action="adding changes")

    def commit(self, message: str | None = None) -> None:
        self._run(
            "commit",
            "--quiet",
            "-m",
            message or default_commit_message(),
            action="creating commit",
        )

    def has_changes(self) -> bool:
        output = self._run("status", "--porcelain", action="checking for changes")
        return bool(output.strip())

    def list_conflicts(self) -> list[str]:
        output = self._run(
            "diff", "--name-only", "--diff-filter=U", action="getting conflicts"
        )
        return [line for line in output.strip().splitlines() if line]

    def __repr__(self) -> str:
        return f"SubprocessGit({self.repo_path}, {self.remote}/{self.branch})"
