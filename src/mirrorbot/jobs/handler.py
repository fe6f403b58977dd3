"""JobOutcomeHandler - Turns CI job results into status checks and retries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mirrorbot.classifier import TraceVerdict, classify
from mirrorbot.config import DEFAULT_DOC_ARTIFACT_URL
from mirrorbot.gitlab import TraceTimeoutError

if TYPE_CHECKING:
    from mirrorbot.api.models import BuildJob
    from mirrorbot.github import GitHubClient
    from mirrorbot.gitlab import GitLabClient

logger = logging.getLogger("mirrorbot.jobs")

RUNNER_SYSTEM_FAILURE = "runner_system_failure"
STUCK_OR_TIMEOUT_FAILURE = "stuck_or_timeout_failure"
SCRIPT_FAILURE = "script_failure"
UNKNOWN_FAILURE = "unknown_failure"


class JobOutcomeHandler:
    """Reacts to finished jobs of the CI mirror.

    Failed jobs are retried when the failure looks like an infrastructure
    problem and reported as a failing status check otherwise. Successful
    jobs only produce a status check when they replace an earlier one.
    """

    def __init__(
        self,
        github: GitHubClient,
        gitlab: GitLabClient,
        gitlab_project: str = "coq/coq",
        doc_build_name: str = "doc:refman",
        doc_artifact_url: str = DEFAULT_DOC_ARTIFACT_URL,
    ) -> None:
        """Initialize the handler.

        Args:
            github: GitHubClient for status checks.
            gitlab: GitLabClient for retries, traces and artifacts.
            gitlab_project: Mirror project path, used for job links.
            doc_build_name: Name of the job publishing the reference manual.
            doc_artifact_url: URL template of the published manual ({build_id}).
        """
        self.github = github
        self.gitlab = gitlab
        self.gitlab_project = gitlab_project
        self.doc_build_name = doc_build_name
        self.doc_artifact_url = doc_artifact_url

    def handle(self, job: BuildJob) -> None:
        """Dispatch a job event on its status."""
        if job.build_status == "failed":
            self.handle_failure(job)
        elif job.build_status == "success":
            self.handle_success(job)
        else:
            logger.debug("Job %d is %s: nothing to do", job.build_id, job.build_status)

    def _job_url(self, job: BuildJob) -> str:
        return self.gitlab.job_url(self.gitlab_project, job.build_id)

    def _report_failure(self, job: BuildJob) -> None:
        if job.build_allow_failure:
            logger.info("Job %d is allowed to fail.", job.build_id)
            return
        self.github.send_status_check(
            commit=job.sha,
            state="failure",
            target_url=self._job_url(job),
            context=job.build_name,
            description=f"{job.build_failure_reason or UNKNOWN_FAILURE} on GitLab CI",
        )

    def handle_failure(self, job: BuildJob) -> None:
        """Retry, report or ignore a failed job depending on why it failed."""
        reason = job.build_failure_reason or UNKNOWN_FAILURE
        logger.info(
            "Failed job %d of project %d (%s): %s",
            job.build_id,
            job.project_id,
            job.build_name,
            reason,
        )

        if reason == RUNNER_SYSTEM_FAILURE:
            logger.info("Runner failure reported by GitLab CI. Retrying...")
            self.gitlab.retry_job(job.project_id, job.build_id)
        elif reason == STUCK_OR_TIMEOUT_FAILURE:
            logger.info("Timeout reported by GitLab CI.")
            self._report_failure(job)
        elif reason == SCRIPT_FAILURE:
            logger.info("Script failure reported, checking the trace...")
            try:
                trace = self.gitlab.wait_for_trace(job.project_id, job.build_id)
            except TraceTimeoutError as e:
                logger.warning("%s; reporting the failure as is", e)
                verdict = TraceVerdict.WARN
            else:
                verdict = classify(trace)

            if verdict is TraceVerdict.RETRY:
                self.gitlab.retry_job(job.project_id, job.build_id)
            elif verdict is TraceVerdict.WARN:
                self._report_failure(job)
        else:
            logger.info("Unusual error.")
            self._report_failure(job)

    def handle_success(self, job: BuildJob) -> None:
        """Link the manual build, or override an earlier failing check."""
        if job.build_name == self.doc_build_name:
            url = self.doc_artifact_url.format(build_id=job.build_id)
            if self.gitlab.artifact_available(url):
                logger.info("Manual build %d published, linking it.", job.build_id)
                self.github.send_status_check(
                    commit=job.sha,
                    state="success",
                    target_url=url,
                    context=job.build_name,
                    description="Link to refman build artifact.",
                )
            else:
                logger.warning("Manual build %d succeeded but %s is not reachable", job.build_id, url)
                self.github.send_status_check(
                    commit=job.sha,
                    state="failure",
                    target_url=self._job_url(job),
                    context=job.build_name,
                    description="Link to refman build artifact: not found.",
                )
            return

        if self.github.has_status_check(job.sha, job.build_name):
            logger.info("Overriding previous status check %s on %s", job.build_name, job.sha)
            self.github.send_status_check(
                commit=job.sha,
                state="success",
                target_url=self._job_url(job),
                context=job.build_name,
                description="Test succeeded on GitLab CI after being retried",
            )
