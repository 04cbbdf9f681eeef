"""
gh_proximity/controller.py - Retarget command and run cancellation.

A new pipeline run starts whenever the caller designates a new target user,
whether from a fresh submission or from clicking a contributor node in the
repository graph. Only the most recent target may publish results:

    1. retarget() cancels the in-flight run task, if any.
    2. Each run carries a generation number; a run that finishes after a
       newer retarget() is discarded instead of published.

Threads started by asyncio.to_thread cannot be interrupted, so a cancelled
run's outstanding HTTP call still finishes in the background; its result is
dropped with the task.
"""

import asyncio
import logging
from typing import Callable, Optional

import networkx as nx

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.graph.builder import retarget_candidates
from gh_proximity.pipeline import PipelineResult, RepoCache, RepoSource, run_proximity_pipeline

logger = logging.getLogger(__name__)


class RetargetController:
    """Owns the current target and the single in-flight pipeline run.

    Must be used from inside a running event loop.

    Args:
        cache:     CacheGateway (or compatible) for descriptor lookup/store.
        github:    GitHubClient (or compatible) for cache misses.
        config:    ProximityConfig.
        on_result: Optional callback invoked with each published result.
    """

    def __init__(
        self,
        cache: RepoCache,
        github: RepoSource,
        config: ProximityConfig = DEFAULT_CONFIG,
        on_result: Optional[Callable[[PipelineResult], None]] = None,
    ) -> None:
        self._cache = cache
        self._github = github
        self._config = config
        self._on_result = on_result
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

        self.current_target: Optional[str] = None
        self.latest: Optional[PipelineResult] = None
        self.last_error: Optional[BaseException] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def retarget(self, username: str) -> asyncio.Task:
        """Cancel any in-flight run and start a new one for *username*."""
        if self.running:
            logger.info("Cancelling run for %s; retargeting to %s", self.current_target, username)
            self._task.cancel()

        self._generation += 1
        self.current_target = username
        self._task = asyncio.create_task(self._run(username, self._generation))
        return self._task

    def retarget_from_node(self, graph: nx.MultiDiGraph, node_id: str) -> asyncio.Task:
        """
        Retarget to a contributor node clicked in a rendered graph.

        Raises:
            ValueError: if node_id is not a contributor node of *graph*.
        """
        if node_id not in retarget_candidates(graph):
            raise ValueError(f"Node '{node_id}' is not a contributor and cannot be a target")
        return self.retarget(node_id)

    def cancel(self) -> None:
        """Cancel the in-flight run without starting a new one."""
        if self.running:
            self._task.cancel()
        self._generation += 1

    async def wait(self) -> Optional[PipelineResult]:
        """
        Wait for the current run and return what it published.

        Returns None if the run was cancelled or superseded.
        Re-raises the run's error (e.g. RateLimitedError) if it failed.
        """
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise

    async def _run(self, username: str, generation: int) -> Optional[PipelineResult]:
        try:
            result = await run_proximity_pipeline(username, self._cache, self._github, self._config)
        except asyncio.CancelledError:
            logger.debug("Run for %s cancelled", username)
            raise
        except Exception as exc:
            if generation == self._generation:
                self.last_error = exc
            raise

        if generation != self._generation:
            logger.info("Discarding stale result for %s", username)
            return None

        self.latest = result
        self.last_error = None
        if self._on_result is not None:
            self._on_result(result)
        return result
