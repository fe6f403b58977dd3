"""Classification of CI job logs.

Rules are tried in order and the first match wins, so a killed or
unreachable runner is retried even when the log also shows test failures.
"""

from __future__ import annotations

import logging
import re

from mirrorbot.classifier.models import TraceVerdict

logger = logging.getLogger("mirrorbot.classifier")


def _literal(*markers: str) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(marker) for marker in markers))


_KILLED = _literal(
    "Job failed: exit code 137",
    "Job failed: exit status 255",
    "Job failed (system failure)",
)
_UPLOAD_FAILED = _literal(
    "Uploading artifacts to coordinator... failed",
    "Uploading artifacts to coordinator... error",
)
_UPLOAD_OK = _literal("Uploading artifacts to coordinator... ok")
_CONNECTIVITY = _literal(
    "transfer closed with outstanding read data remaining",
    "HTTP request sent, awaiting response... 500 Internal Server Error",
    "The remote end hung up unexpectedly",
)
_NOT_A_TREE = _literal("fatal: reference is not a tree")
_MISSING_IMAGE = re.compile(r"Error response from daemon: manifest for .* not found")


def _upload_failed(trace: str) -> bool:
    """An artifact upload failed and no later upload succeeded."""
    failures = list(_UPLOAD_FAILED.finditer(trace))
    if not failures:
        return False
    return _UPLOAD_OK.search(trace, failures[-1].end()) is None


def classify(trace: str) -> TraceVerdict:
    """Map the text of a failed job's log to a verdict."""
    logger.debug("Classifying trace of %d chars", len(trace))

    if _KILLED.search(trace):
        logger.info("Job was killed by the runner. Retrying.")
        return TraceVerdict.RETRY
    if _upload_failed(trace):
        logger.info("Artifact upload failed. Retrying.")
        return TraceVerdict.RETRY
    if _CONNECTIVITY.search(trace):
        logger.info("Connectivity issue. Retrying.")
        return TraceVerdict.RETRY
    if _NOT_A_TREE.search(trace):
        logger.info("Normal failure: reference is not a tree.")
        return TraceVerdict.IGNORE
    if _MISSING_IMAGE.search(trace):
        logger.info("Docker image not found, nothing specific to report.")
        return TraceVerdict.IGNORE

    logger.info("Actual failure.")
    return TraceVerdict.WARN
