"""Custom exceptions for the Backport-Spec Codec."""


class BackportSpecError(ValueError):
    """Milestone description does not describe a backport."""
