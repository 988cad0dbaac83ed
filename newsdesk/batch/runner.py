"""Run a batch of entries through the dispatcher and wait for all of them."""

from __future__ import annotations

import logging
from concurrent.futures import Future, wait
from dataclasses import dataclass

from newsdesk.data_models import TaskResult
from newsdesk.dispatch import CancellationToken, Dispatcher, build_request
from newsdesk.exceptions import NewsdeskError

from .reader import BatchEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchOutcome:
    entry: BatchEntry
    result: TaskResult


def _resolved(result: TaskResult) -> Future[TaskResult]:
    future: Future[TaskResult] = Future()
    future.set_result(result)
    return future


def run_batch(
    dispatcher: Dispatcher,
    entries: list[BatchEntry],
    timeout: float | None = None,
) -> list[BatchOutcome]:
    """Submit every entry, wait for all results and return them in input order.

    Each entry gets its own deadline of ``timeout`` seconds, started at
    submission. Entries that fail validation or cannot be submitted get an
    error outcome instead of aborting the batch.
    """
    futures: list[Future[TaskResult]] = []
    for entry in entries:
        try:
            request = build_request(entry.topic, entry.days, entry.max_items)
            token = CancellationToken.with_timeout(timeout)
            futures.append(dispatcher.submit_wait(request, token))
        except NewsdeskError as exc:
            logger.warning("Could not submit %r: %s", entry.topic, exc)
            futures.append(_resolved(TaskResult.failure(exc)))

    wait(futures)

    outcomes = [
        BatchOutcome(entry=entry, result=future.result())
        for entry, future in zip(entries, futures, strict=True)
    ]
    failed = sum(1 for outcome in outcomes if not outcome.result.ok)
    logger.info("Batch finished: %d tasks, %d failed", len(outcomes), failed)
    return outcomes
