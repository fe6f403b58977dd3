"""mirrorbot - keeps a CI mirror in sync with pull requests and drives backports."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
