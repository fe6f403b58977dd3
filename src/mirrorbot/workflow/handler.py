"""BackportWorkflow - Advances or rejects backports from push and card events.

The workflow keeps no state of its own. A pull request takes part when its
milestone description holds a backport sentence; its progress is the column
its project card sits in.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from mirrorbot.backport import BackportSpec, decode
from mirrorbot.git_manager import PushError, staging_branch
from mirrorbot.github import PullRequestNotFoundError

if TYPE_CHECKING:
    from mirrorbot.api.models import ProjectCardEvent, PushEvent
    from mirrorbot.api.tasks import TaskTracker
    from mirrorbot.git_manager import GitManager
    from mirrorbot.github import GitHubClient, GitHubGraphQL, ProjectCard, ProjectColumn
    from mirrorbot.runner import CommandRunner

logger = logging.getLogger("mirrorbot.workflow")

MERGE_MESSAGE = re.compile(r"Merge PR #([0-9]+):")
BACKPORT_MESSAGE = re.compile(r"Backport PR #([0-9]+):")


class BackportWorkflow:
    """Handles the push and project-card events of the backport workflow."""

    def __init__(
        self,
        github: GitHubClient,
        graphql: GitHubGraphQL,
        git: GitManager,
        runner: CommandRunner,
        tracker: TaskTracker,
        bot_name: str = "coqbot",
        backport_script: str = "./backport-pr.sh",
    ) -> None:
        """Initialize the workflow handler.

        Args:
            github: GitHubClient for cards and milestones.
            graphql: GitHubGraphQL for PR ids, milestones and cards.
            git: GitManager for the workspace and the staging push.
            runner: CommandRunner executing the backport script.
            tracker: TaskTracker running backports in the background.
            bot_name: Prefix of the backport sentence in milestones.
            backport_script: Path of the script performing the backport merge.
        """
        self.github = github
        self.graphql = graphql
        self.git = git
        self.runner = runner
        self.tracker = tracker
        self.bot_name = bot_name
        # Backports run inside a scratch workspace: relative script paths are
        # resolved against the server's working directory, bare names use PATH.
        if "/" in backport_script:
            backport_script = str(Path(backport_script).resolve())
        self.backport_script = backport_script

    def pull_request_info(self, number: int) -> tuple[int, BackportSpec] | None:
        """Database id and backport spec of a PR, or None if it is not tracked."""
        try:
            info = self.graphql.pull_request_id_and_milestone(number)
        except PullRequestNotFoundError:
            logger.info("PR #%d not found", number)
            return None
        if info.milestone is None:
            logger.info("PR #%d has no milestone", number)
            return None
        spec = decode(info.milestone.description, self.bot_name)
        if spec is None:
            logger.info("Milestone %r of PR #%d has no backport info", info.milestone.title, number)
            return None
        return info.database_id, spec

    def backported_card(
        self, number: int, base_ref: str
    ) -> tuple[ProjectCard, ProjectColumn] | None:
        """Find the card of a backported PR and the column it should move to.

        Returns None unless the push landed on the milestone's backport branch
        and the PR has a card, outside the backported column, on the board
        that owns that column.
        """
        try:
            cards, milestone = self.graphql.pull_request_milestone_and_cards(number)
        except PullRequestNotFoundError:
            logger.info("PR #%d not found", number)
            return None
        spec = decode(milestone.description if milestone else None, self.bot_name)
        if spec is None:
            logger.info("PR #%d has no backport info", number)
            return None
        if base_ref != f"refs/heads/{spec.backport_to}":
            logger.info("Push to %s is not to backport branch %s", base_ref, spec.backport_to)
            return None
        for card in cards:
            target = card.sibling(spec.backported_column)
            if target is not None and card.column.db_id != spec.backported_column:
                return card, target
        logger.info("PR #%d has no card to move to column %d", number, spec.backported_column)
        return None

    def handle_push(self, event: PushEvent) -> None:
        """Look for merge and backport commits in a push, in order."""
        for commit in event.commits:
            merged = MERGE_MESSAGE.search(commit.message)
            if merged:
                self.on_merge(int(merged.group(1)), event.ref)
                continue
            backported = BACKPORT_MESSAGE.search(commit.message)
            if backported:
                self.on_backport(int(backported.group(1)), event.ref)

    def on_merge(self, number: int, ref: str) -> None:
        """A PR was merged: record it as backported or request its backport."""
        logger.info("PR #%d was merged into %s", number, ref)
        info = self.pull_request_info(number)
        if info is None:
            return
        database_id, spec = info

        if ref == f"refs/heads/{spec.backport_to}":
            logger.info("PR #%d was merged into the backport branch directly", number)
            self.github.add_card_to_column(database_id, spec.backported_column)
            return

        logger.info("Backporting PR #%d to %s was requested", number, spec.backport_to)
        self.tracker.submit(
            f"backport-{number}-{spec.backport_to}",
            self.backport_pr,
            number,
            spec.backport_to,
        )
        self.github.add_card_to_column(database_id, spec.request_inclusion_column)

    def on_backport(self, number: int, ref: str) -> None:
        """A PR was backported: move its card to the backported column."""
        logger.info("PR #%d was backported to %s", number, ref)
        found = self.backported_card(number, ref)
        if found is None:
            return
        card, column = found
        self.graphql.move_card_to_column(card.id, column.id)

    def backport_pr(self, number: int, target: str) -> bool:
        """Run the backport script and push its result to ``staging-<target>``.

        Returns:
            True if the script succeeded and its result was pushed.
        """
        branch = staging_branch(target)
        with self.git.workspace() as ws:
            result = self.runner.run(self.backport_script, str(number), target, cwd=ws)
            if not result.ok:
                logger.error("Backport of PR #%d to %s failed", number, target)
                return False
            try:
                self.git.force_push(ws, "HEAD", branch)
            except PushError as e:
                logger.error("Backport of PR #%d not pushed: %s", number, e)
                return False
        logger.info("Backport of PR #%d pushed to %s", number, branch)
        return True

    def handle_project_card(self, event: ProjectCardEvent) -> None:
        """A card removed from the request-inclusion column rejects the backport."""
        if event.action != "deleted":
            return
        number = event.issue_number
        if number is None:
            logger.debug("Deleted card does not point to an issue or PR")
            return

        column = event.column
        logger.info("PR #%d was removed from project column %s", number, column)
        info = self.pull_request_info(number)
        if info is None:
            return
        _, spec = info

        if column == spec.request_inclusion_column:
            logger.info(
                "Backport of PR #%d rejected, moving it to milestone %d",
                number,
                spec.rejected_milestone,
            )
            self.github.set_milestone(number, spec.rejected_milestone)
        else:
            logger.info("Column %s is not a request inclusion column: ignoring", column)
