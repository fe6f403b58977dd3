"""PRMirror - Keeps one mirror branch per open pull request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mirrorbot.git_manager import GitManagerError, MirrorBranch, PushError

if TYPE_CHECKING:
    from mirrorbot.api.models import PullRequestEvent
    from mirrorbot.git_manager import GitManager
    from mirrorbot.github import GitHubClient

logger = logging.getLogger("mirrorbot.mirror")

MIRROR_ACTIONS = frozenset({"opened", "reopened", "synchronize"})
REBASE_LABEL = "needs: rebase"
STALE_BRANCH_DESCRIPTION = (
    "Pipeline did not run on GitLab CI because branch is not up-to-date."
)


class PRMirror:
    """Mirrors pull requests onto ``pr-<number>`` branches of the CI mirror.

    The head of the PR must fast-forward its base. When it does not, the PR
    gets the "needs: rebase" label and no branch is pushed.
    """

    def __init__(self, git: GitManager, github: GitHubClient) -> None:
        """Initialize the mirror protocol.

        Args:
            git: GitManager for fetch/merge/push in scratch workspaces.
            github: GitHubClient for labels, milestones and status checks.
        """
        self.git = git
        self.github = github

    def handle(self, pr: PullRequestEvent) -> None:
        """Dispatch a pull request event on its action."""
        logger.info("PR #%d: action %s", pr.number, pr.action)
        if pr.action in MIRROR_ACTIONS:
            self.mirror(pr)
        elif pr.action == "closed":
            self.retire(pr)
        else:
            logger.debug("PR #%d: nothing to do for action %s", pr.number, pr.action)

    def _push_mirror_branch(self, pr: PullRequestEvent) -> bool:
        """Fetch base, fast-forward to head and push. False if the PR is not rebased."""
        branch = MirrorBranch(pr.number).name
        head_url = pr.head.repo_url
        if head_url is None:
            logger.warning("PR #%d: head repository is gone, cannot mirror", pr.number)
            return False

        with self.git.workspace() as ws:
            try:
                self.git.fetch_and_checkout(ws, pr.base.repo_url, pr.base.ref)
                self.git.pull_ff(ws, head_url, pr.head.ref)
            except GitManagerError as e:
                logger.info("PR #%d: %s", pr.number, e)
                return False

            try:
                self.git.force_push(ws, "HEAD", branch)
            except PushError as e:
                logger.warning("PR #%d: ignoring push failure: %s", pr.number, e)
        return True

    def mirror(self, pr: PullRequestEvent) -> None:
        """Mirror an opened, reopened or updated pull request.

        On success a stale "needs: rebase" label is removed. On failure the
        label is added and a failing status check is posted on the head commit.

        Raises:
            WorkspaceError: If no scratch repository could be created.
        """
        if self._push_mirror_branch(pr):
            logger.info("PR #%d mirrored to %s", pr.number, MirrorBranch(pr.number).name)
            if REBASE_LABEL in pr.labels:
                self.github.remove_label(pr.number, REBASE_LABEL)
            return

        logger.info("PR #%d is not up to date with %s", pr.number, pr.base.ref)
        self.github.add_label(pr.number, REBASE_LABEL)
        self.github.send_status_check(
            commit=pr.head.sha,
            state="failure",
            target_url="",
            context=f"ci/gitlab/{MirrorBranch(pr.number).name}",
            description=STALE_BRANCH_DESCRIPTION,
        )

    def retire(self, pr: PullRequestEvent) -> None:
        """Clean up after a closed pull request.

        The mirror branch is deleted on a best-effort basis. A PR closed
        without being merged loses its milestone.
        """
        branch = MirrorBranch(pr.number).name
        try:
            with self.git.workspace() as ws:
                self.git.delete_remote_branch(ws, branch)
        except GitManagerError as e:
            logger.warning("PR #%d: ignoring failure to delete %s: %s", pr.number, branch, e)

        if not pr.merged:
            logger.info("PR #%d closed without being merged: removing its milestone", pr.number)
            self.github.clear_milestone(pr.number)
