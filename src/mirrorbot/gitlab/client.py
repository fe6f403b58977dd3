"""GitLabClient - Talks to the CI provider that runs the mirror's pipelines."""

from __future__ import annotations

import logging
import time

import httpx

from mirrorbot.gitlab.exceptions import GitLabError, TraceTimeoutError

logger = logging.getLogger("mirrorbot.gitlab")


class GitLabClient:
    """REST client for jobs on the CI provider."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://gitlab.com",
        poll_interval: float = 2.0,
        max_attempts: int = 8,
    ) -> None:
        """Initialize the GitLab client.

        Args:
            token: GitLab private access token
            base_url: GitLab instance URL (API lives under /api/v4)
            poll_interval: Initial delay between trace polls, doubled after each
            max_attempts: Number of trace requests before giving up
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the GitLab API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=f"{self.base_url}/api/v4",
                headers={"PRIVATE-TOKEN": self.token, "User-Agent": "coqbot"},
                timeout=30.0,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def job_url(self, project: str, build_id: int) -> str:
        """Web URL of a job's log page."""
        return f"{self.base_url}/{project}/-/jobs/{build_id}"

    def retry_job(self, project_id: int, build_id: int) -> None:
        """Ask the CI provider to run a job again.

        Raises:
            GitLabError: If the retry request is rejected
        """
        logger.info("Retrying job %d of project %d", build_id, project_id)
        response = self.client.post(f"/projects/{project_id}/jobs/{build_id}/retry")
        if not 200 <= response.status_code < 300:
            logger.error("Failed to retry job %d: %s", build_id, response.text)
            raise GitLabError(
                f"Failed to retry job {build_id}: {response.status_code} - {response.text}"
            )

    def get_trace(self, project_id: int, build_id: int) -> str:
        """Fetch a job's log once. An empty string means it is not available yet.

        Raises:
            GitLabError: If the request fails
        """
        response = self.client.get(f"/projects/{project_id}/jobs/{build_id}/trace")
        if response.status_code != 200:
            raise GitLabError(
                f"Failed to get trace of job {build_id}: {response.status_code} - {response.text}"
            )
        return response.text

    def wait_for_trace(self, project_id: int, build_id: int) -> str:
        """Poll a job's log until it is non-empty, with exponential backoff.

        Returns:
            The trace text.

        Raises:
            TraceTimeoutError: If the trace is still empty after max_attempts requests
            GitLabError: If a request fails
        """
        delay = self.poll_interval
        for attempt in range(1, self.max_attempts + 1):
            trace = self.get_trace(project_id, build_id)
            if trace:
                logger.info("Got trace of job %d (%d chars)", build_id, len(trace))
                return trace
            if attempt == self.max_attempts:
                break
            logger.debug(
                "Trace of job %d empty (attempt %d/%d), waiting %.1fs",
                build_id,
                attempt,
                self.max_attempts,
                delay,
            )
            time.sleep(delay)
            delay *= 2

        raise TraceTimeoutError(
            f"Trace of job {build_id} still empty after {self.max_attempts} attempts"
        )

    def artifact_available(self, url: str) -> bool:
        """Whether a published artifact answers with HTTP 200."""
        try:
            response = httpx.get(url, follow_redirects=True, timeout=30.0)
        except httpx.HTTPError as e:
            logger.warning("Could not reach artifact %s: %s", url, e)
            return False
        logger.debug("Artifact %s answered %d", url, response.status_code)
        return response.status_code == 200
