"""Trace Classifier - Decides whether a failed CI job should be retried."""

from mirrorbot.classifier.classifier import classify
from mirrorbot.classifier.models import TraceVerdict

__all__ = [
    "TraceVerdict",
    "classify",
]
