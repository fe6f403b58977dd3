"""Shared pytest fixtures and configuration."""

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

import pytest


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class InlineTracker:
    """TaskTracker stand-in that runs tasks immediately and records them."""

    def __init__(self) -> None:
        self.submitted: list[tuple[str, Callable[..., Any], tuple[Any, ...]]] = []
        self.active = 0

    def submit(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        self.submitted.append((name, fn, args))
        future: Future = Future()
        future.set_result(fn(*args, **kwargs))
        return future

    def shutdown(self, wait: bool = True) -> None:
        pass


@pytest.fixture
def inline_tracker() -> InlineTracker:
    """A tracker that runs submitted tasks synchronously."""
    return InlineTracker()
