"""Background execution of webhook handlers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

logger = logging.getLogger("mirrorbot.api.tasks")


class TaskTracker:
    """Runs handlers in a bounded thread pool and logs how they end.

    Each submitted task is its own failure domain: an exception is logged
    with its traceback and goes no further.
    """

    def __init__(self, max_workers: int = 8) -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="mirrorbot-task"
        )
        self._lock = threading.Lock()
        self._active: dict[Future[Any], str] = {}

    @property
    def active(self) -> int:
        """Number of submitted tasks that have not finished yet."""
        with self._lock:
            return len(self._active)

    def submit(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future[Any]:
        """Schedule ``fn(*args, **kwargs)`` and return immediately."""
        future = self._executor.submit(self._run, name, fn, *args, **kwargs)
        with self._lock:
            self._active[future] = name
        future.add_done_callback(self._forget)
        logger.debug("Submitted task %s", name)
        return future

    def _forget(self, future: Future[Any]) -> None:
        with self._lock:
            self._active.pop(future, None)

    @staticmethod
    def _run(name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        logger.info("Task %s started", name)
        try:
            result = fn(*args, **kwargs)
        except Exception:
            logger.exception("Task %s failed", name)
            return None
        logger.info("Task %s finished", name)
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; optionally wait for running ones."""
        logger.info("Shutting down task tracker (%d active)", self.active)
        self._executor.shutdown(wait=wait)
