"""GitManager - Runs the git side of mirroring in scratch working trees."""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mirrorbot.git_manager.exceptions import (
    FetchError,
    MergeError,
    PushError,
    WorkspaceError,
)
from mirrorbot.logging import sanitize_for_log
from mirrorbot.runner import CommandResult, CommandRunner

logger = logging.getLogger("mirrorbot.git_manager")


class GitManager:
    """Manages fetch, fast-forward and push operations against the CI mirror.

    Every task gets its own throwaway repository from ``workspace()``, so
    concurrent pull-request events never share a checkout.
    """

    def __init__(
        self,
        runner: CommandRunner,
        mirror_remote: str,
        user_name: str = "coqbot",
        user_email: str = "coqbot@users.noreply.github.com",
        scratch_root: str | Path | None = None,
    ) -> None:
        """Initialize Git Manager.

        Args:
            runner: CommandRunner used for every git invocation
            mirror_remote: Push URL of the CI mirror repository
            user_name: Committer name configured in scratch repositories
            user_email: Committer email configured in scratch repositories
            scratch_root: Parent directory for workspaces (default: system temp)
        """
        self.runner = runner
        self.mirror_remote = mirror_remote
        self.user_name = user_name
        self.user_email = user_email
        self.scratch_root = Path(scratch_root) if scratch_root is not None else None

    def _run_git(self, workspace: Path, *args: str) -> CommandResult:
        return self.runner.run("git", *args, cwd=workspace)

    @contextmanager
    def workspace(self) -> Iterator[Path]:
        """Create an empty repository that is deleted when the block exits.

        Raises:
            WorkspaceError: If the directory or repository cannot be created
        """
        try:
            path = Path(tempfile.mkdtemp(prefix="mirrorbot-", dir=self.scratch_root))
        except OSError as e:
            raise WorkspaceError(f"Failed to create scratch directory: {e}") from e

        try:
            for args in (
                ("init", "-q"),
                ("config", "user.name", self.user_name),
                ("config", "user.email", self.user_email),
            ):
                result = self._run_git(path, *args)
                if not result.ok:
                    raise WorkspaceError(f"git {args[0]} failed in {path}: {result.output}")
            logger.debug("Created workspace %s", path)
            yield path
        finally:
            shutil.rmtree(path, ignore_errors=True)
            logger.debug("Removed workspace %s", path)

    def fetch_and_checkout(self, workspace: Path, repo_url: str, ref: str) -> None:
        """Fetch ``ref`` from ``repo_url`` and check it out detached.

        Raises:
            FetchError: If the fetch or checkout fails
        """
        logger.info("Fetching %s from %s", ref, sanitize_for_log(repo_url))
        if not self._run_git(workspace, "fetch", "-q", repo_url, ref).ok:
            raise FetchError(f"Failed to fetch '{ref}' from {sanitize_for_log(repo_url)}")
        if not self._run_git(workspace, "checkout", "-q", "FETCH_HEAD").ok:
            raise FetchError(f"Failed to check out '{ref}'")

    def pull_ff(self, workspace: Path, repo_url: str, ref: str) -> None:
        """Fast-forward the checkout to ``ref`` of ``repo_url``.

        Raises:
            MergeError: If the pull fails or is not a strict fast-forward
        """
        logger.info("Fast-forwarding to %s from %s", ref, sanitize_for_log(repo_url))
        if not self._run_git(workspace, "pull", "-q", "--ff-only", repo_url, ref).ok:
            raise MergeError(f"'{ref}' is not a fast-forward of the checked out base")

    def force_push(self, workspace: Path, local_ref: str, branch: str) -> None:
        """Force-push ``local_ref`` to ``branch`` on the mirror.

        Raises:
            PushError: If the push fails
        """
        logger.info("Force-pushing %s to mirror branch %s", local_ref, branch)
        refspec = f"+{local_ref}:refs/heads/{branch}"
        if not self._run_git(workspace, "push", self.mirror_remote, refspec).ok:
            raise PushError(f"Failed to push '{local_ref}' to mirror branch '{branch}'")

    def delete_remote_branch(self, workspace: Path, branch: str) -> None:
        """Delete ``branch`` from the mirror.

        Raises:
            PushError: If the deletion fails
        """
        logger.info("Deleting mirror branch %s", branch)
        if not self._run_git(workspace, "push", self.mirror_remote, f":refs/heads/{branch}").ok:
            raise PushError(f"Failed to delete mirror branch '{branch}'")
