"""Reading and writing the backport sentence of a milestone description.

A milestone takes part in the backport workflow when its description
contains a sentence of this exact shape (on one line)::

    coqbot: backport to v8.15 (request inclusion column:
    https://github.com/coq/coq/projects/43#column-7463451; backported column:
    https://github.com/coq/coq/projects/43#column-7463452; move rejected PRs to:
    https://github.com/coq/coq/milestone/52)
"""

from __future__ import annotations

import re

from mirrorbot.backport.exceptions import BackportSpecError
from mirrorbot.backport.models import BackportSpec

_COLUMN_URL = r"https://github\.com/[^/\s]+/[^/\s]+/projects/[0-9]+#column-([0-9]+)"
_MILESTONE_URL = r"https://github\.com/[^/\s]+/[^/\s]+/milestone/([0-9]+)"
_REPO = re.compile(r"[^/\s]+/[^/\s]+")


def _sentence(bot_name: str) -> re.Pattern[str]:
    return re.compile(
        re.escape(bot_name)
        + r": backport to (\S+) \(request inclusion column: "
        + _COLUMN_URL
        + r"; backported column: "
        + _COLUMN_URL
        + r"; move rejected PRs to: "
        + _MILESTONE_URL
        + r"\)"
    )


def parse(description: str, bot_name: str = "coqbot") -> BackportSpec:
    """Decode the backport sentence of a milestone description.

    Raises:
        BackportSpecError: If the description holds no well-formed sentence.
    """
    match = _sentence(bot_name).search(description)
    if match is None:
        raise BackportSpecError(f"No '{bot_name}: backport to ...' sentence found")
    backport_to, inclusion, backported, rejected = match.groups()
    return BackportSpec(
        backport_to=backport_to,
        request_inclusion_column=int(inclusion),
        backported_column=int(backported),
        rejected_milestone=int(rejected),
    )


def decode(description: str | None, bot_name: str = "coqbot") -> BackportSpec | None:
    """Like ``parse`` but returns None for milestones outside the workflow."""
    if not description:
        return None
    try:
        return parse(description, bot_name)
    except BackportSpecError:
        return None


def encode(
    spec: BackportSpec,
    bot_name: str = "coqbot",
    repo: str = "coq/coq",
    project_number: int = 1,
) -> str:
    """Render the sentence that ``decode`` turns back into ``spec``.

    Raises:
        BackportSpecError: If the branch, repository or an id cannot be written
            in a sentence that decodes back to ``spec``.
    """
    if not spec.backport_to or any(c.isspace() for c in spec.backport_to):
        raise BackportSpecError(f"Invalid backport branch name {spec.backport_to!r}")
    if not _REPO.fullmatch(repo):
        raise BackportSpecError(f"Invalid repository {repo!r}, expected 'owner/name'")
    for name, value in (
        ("project number", project_number),
        ("request inclusion column", spec.request_inclusion_column),
        ("backported column", spec.backported_column),
        ("rejected milestone", spec.rejected_milestone),
    ):
        if value < 0:
            raise BackportSpecError(f"Invalid {name} {value}: ids cannot be negative")
    project_url = f"https://github.com/{repo}/projects/{project_number}"
    return (
        f"{bot_name}: backport to {spec.backport_to} "
        f"(request inclusion column: {project_url}#column-{spec.request_inclusion_column}; "
        f"backported column: {project_url}#column-{spec.backported_column}; "
        f"move rejected PRs to: https://github.com/{repo}/milestone/{spec.rejected_milestone})"
    )
