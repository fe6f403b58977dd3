"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, urlsplit

DEFAULT_DOC_ARTIFACT_URL = (
    "https://coq.gitlab.io/-/coq/-/jobs/{build_id}"
    "/artifacts/_install_ci/share/doc/coq/sphinx/html/index.html"
)


class ConfigError(Exception):
    """Required configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Settings for the webhook server and its handlers."""

    github_token: str
    gitlab_token: str
    mirror_remote: str
    port: int = 8000
    github_repo: str = "coq/coq"
    github_api_url: str = "https://api.github.com"
    gitlab_url: str = "https://gitlab.com"
    gitlab_project: str = "coq/coq"
    mirror_ssh_key: str | None = None
    bot_name: str = "coqbot"
    backport_script: str = "./backport-pr.sh"
    doc_build_name: str = "doc:refman"
    doc_artifact_url: str = DEFAULT_DOC_ARTIFACT_URL
    max_workers: int = 8
    max_commands: int = 2
    command_timeout: int = 1800
    trace_poll_interval: float = 2.0
    trace_poll_attempts: int = 8
    git_user_name: str = "coqbot"
    git_user_email: str = "coqbot@users.noreply.github.com"

    @property
    def command_env(self) -> dict[str, str]:
        """Extra environment for git commands (SSH key for pushes)."""
        if self.mirror_ssh_key:
            return {
                "GIT_SSH_COMMAND": (
                    f"ssh -i {self.mirror_ssh_key} -o StrictHostKeyChecking=no"
                )
            }
        return {}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Raises:
            ConfigError: If a required variable is missing or a number is malformed.
        """
        env = os.environ if environ is None else environ

        def required(name: str) -> str:
            value = env.get(name)
            if not value:
                raise ConfigError(f"{name} is not set")
            return value

        def integer(name: str, default: int) -> int:
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return int(raw)
            except ValueError as e:
                raise ConfigError(f"{name} must be an integer, got {raw!r}") from e

        def number(name: str, default: float) -> float:
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return float(raw)
            except ValueError as e:
                raise ConfigError(f"{name} must be a number, got {raw!r}") from e

        gitlab_url = env.get("GITLAB_URL", "https://gitlab.com").rstrip("/")
        gitlab_project = env.get("GITLAB_PROJECT", "coq/coq")

        ssh_key = env.get("MIRROR_SSH_KEY")
        if ssh_key:
            ssh_key = str(Path(ssh_key).expanduser())
            if not Path(ssh_key).is_file():
                ssh_key = None

        mirror_remote = env.get("MIRROR_REMOTE")
        if not mirror_remote:
            host = urlsplit(gitlab_url).netloc
            if ssh_key:
                mirror_remote = f"git@{host}:{gitlab_project}.git"
            else:
                user = quote(required("USERNAME"), safe="")
                password = quote(required("PASSWORD"), safe="")
                mirror_remote = f"https://{user}:{password}@{host}/{gitlab_project}.git"

        return cls(
            github_token=required("GITHUB_ACCESS_TOKEN"),
            gitlab_token=required("GITLAB_ACCESS_TOKEN"),
            mirror_remote=mirror_remote,
            port=integer("PORT", 8000),
            github_repo=env.get("GITHUB_REPO", "coq/coq"),
            github_api_url=env.get("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
            gitlab_url=gitlab_url,
            gitlab_project=gitlab_project,
            mirror_ssh_key=ssh_key,
            bot_name=env.get("BOT_NAME", "coqbot"),
            backport_script=env.get("BACKPORT_SCRIPT", "./backport-pr.sh"),
            doc_build_name=env.get("DOC_BUILD_NAME", "doc:refman"),
            doc_artifact_url=env.get("DOC_ARTIFACT_URL", DEFAULT_DOC_ARTIFACT_URL),
            max_workers=integer("MAX_WORKERS", 8),
            max_commands=integer("MAX_COMMANDS", 2),
            command_timeout=integer("COMMAND_TIMEOUT", 1800),
            trace_poll_interval=number("TRACE_POLL_INTERVAL", 2.0),
            trace_poll_attempts=integer("TRACE_POLL_ATTEMPTS", 8),
            git_user_name=env.get("GIT_USER_NAME", "coqbot"),
            git_user_email=env.get("GIT_USER_EMAIL", "coqbot@users.noreply.github.com"),
        )
