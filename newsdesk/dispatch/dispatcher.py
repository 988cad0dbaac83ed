"""Bounded worker pool running cache-aside resolutions."""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum

from pydantic import ValidationError

from newsdesk.data_models import SearchRequest, TaskResult
from newsdesk.exceptions import (
    Cancelled,
    DispatcherClosed,
    InternalError,
    InvalidSearchRequest,
    QueueFull,
)

from .cancellation import CancellationToken
from .resolver import CacheAsideResolver

logger = logging.getLogger(__name__)

# How often a blocked submitter rechecks the queue and its token
_SUBMIT_POLL_SECONDS = 0.05


class WorkerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class SearchTask:
    """A queued request together with its private response channel."""

    request: SearchRequest
    token: CancellationToken
    future: Future[TaskResult] = field(default_factory=Future)


def build_request(topic: str, days: int, max_items: int) -> SearchRequest:
    """Validate submission input into a SearchRequest."""
    try:
        return SearchRequest(topic=topic, days=days, max_items=max_items)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidSearchRequest(
            f"invalid search request: {problems}",
            details={"topic": topic, "days": days, "max_items": max_items},
        ) from exc


class Dispatcher:
    """Fixed pool of worker threads sharing one bounded task queue.

    Each worker takes one task at a time, runs the resolver and sets exactly
    one TaskResult on the task's future. ``close()`` stops intake, lets
    queued and in-flight tasks finish and joins the workers.

    Example:
        with Dispatcher(resolver, workers=8) as dispatcher:
            result = dispatcher.search("ai", days=7, max_items=3, timeout=20)
    """

    def __init__(
        self,
        resolver: CacheAsideResolver,
        workers: int = 8,
        queue_capacity: int = 1000,
    ):
        if workers < 1:
            raise ValueError("workers must be >= 1")
        if queue_capacity < 1:
            raise ValueError("queue_capacity must be >= 1")

        self._resolver = resolver
        self._workers = workers
        self._capacity = queue_capacity
        self._queue: queue.Queue[SearchTask | None] = queue.Queue(queue_capacity)
        self._lock = threading.Lock()
        self._closed = False
        self._threads: list[threading.Thread] = []
        self._states: list[WorkerState] = []

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> Dispatcher:
        with self._lock:
            if self._closed:
                raise DispatcherClosed()
            if self._threads:
                return self
            for index in range(self._workers):
                self._states.append(WorkerState.IDLE)
                thread = threading.Thread(
                    target=self._run_worker,
                    args=(index,),
                    name=f"newsdesk-worker-{index}",
                    daemon=True,
                )
                self._threads.append(thread)
                thread.start()
        logger.info(
            "Dispatcher started: %d workers, queue capacity %d",
            self._workers,
            self._capacity,
        )
        return self

    def close(self, wait: bool = True) -> None:
        """Stop accepting tasks; workers exit once the queue is drained."""
        with self._lock:
            if self._closed:
                already_closed = True
            else:
                already_closed = False
                self._closed = True
        if not already_closed:
            # One None stop marker per worker, queued behind all pending tasks
            for _ in self._threads:
                self._queue.put(None)
            logger.info("Dispatcher closing")

        if wait:
            for thread in self._threads:
                thread.join()
            logger.info("Dispatcher stopped")

    def __enter__(self) -> Dispatcher:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close(wait=True)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def worker_states(self) -> list[WorkerState]:
        with self._lock:
            return list(self._states)

    @property
    def pending(self) -> int:
        """Approximate number of queued tasks."""
        return self._queue.qsize()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def _try_enqueue(self, task: SearchTask) -> bool:
        with self._lock:
            if self._closed:
                raise DispatcherClosed()
            try:
                self._queue.put_nowait(task)
            except queue.Full:
                return False
        return True

    def submit(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> Future[TaskResult]:
        """Enqueue ``request`` without blocking.

        Raises QueueFull when the queue is at capacity and DispatcherClosed
        after ``close()``.

        To cancel a task, use ``token.cancel()``: the worker then resolves the
        future with a Cancelled result. Calling ``Future.cancel()`` on a task
        that is still queued makes the worker skip it, so ``result()`` raises
        ``concurrent.futures.CancelledError`` and no TaskResult is produced.
        """
        task = SearchTask(request=request, token=token or CancellationToken())
        if not self._try_enqueue(task):
            raise QueueFull(self._capacity)
        return task.future

    def submit_wait(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> Future[TaskResult]:
        """Enqueue ``request``, waiting for space until the token fires.

        If the token fires first, the returned future is already resolved
        with a Cancelled error.
        """
        task = SearchTask(request=request, token=token or CancellationToken())
        while not self._try_enqueue(task):
            if task.token.wait(_SUBMIT_POLL_SECONDS):
                logger.warning("Timed out submitting task for %r", request.topic)
                task.future.set_result(
                    TaskResult.failure(Cancelled("timeout submitting task"))
                )
                break
        return task.future

    def search(
        self,
        topic: str,
        days: int,
        max_items: int,
        timeout: float | None = None,
    ) -> TaskResult:
        """Resolve one search synchronously.

        Validation errors and submission after close are raised; everything
        that happens once the task is accepted comes back as a TaskResult.
        """
        request = build_request(topic, days, max_items)
        token = CancellationToken.with_timeout(timeout)
        return self.submit_wait(request, token).result()

    # -------------------------------------------------------------------------
    # Workers
    # -------------------------------------------------------------------------

    def _set_state(self, index: int, state: WorkerState) -> None:
        with self._lock:
            self._states[index] = state

    def _execute(self, task: SearchTask) -> TaskResult:
        try:
            return self._resolver.resolve(task.request, task.token)
        except Exception:
            logger.exception("Unexpected error resolving %r", task.request.topic)
            return TaskResult.failure(InternalError())

    def _run_worker(self, index: int) -> None:
        logger.debug("Worker %d started", index)
        while True:
            task = self._queue.get()
            try:
                if task is None:
                    break
                if not task.future.set_running_or_notify_cancel():
                    logger.debug(
                        "Skipping task for %r cancelled through its future",
                        task.request.topic,
                    )
                    continue
                self._set_state(index, WorkerState.RUNNING)
                task.future.set_result(self._execute(task))
                self._set_state(index, WorkerState.IDLE)
            finally:
                self._queue.task_done()
        self._set_state(index, WorkerState.TERMINATED)
        logger.debug("Worker %d terminated", index)
