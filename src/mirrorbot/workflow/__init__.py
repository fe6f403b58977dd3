"""Backport Workflow Handler - Tracks backports on project boards and milestones."""

from mirrorbot.workflow.handler import BACKPORT_MESSAGE, MERGE_MESSAGE, BackportWorkflow

__all__ = [
    "BACKPORT_MESSAGE",
    "MERGE_MESSAGE",
    "BackportWorkflow",
]
