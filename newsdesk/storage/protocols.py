"""Storage layer protocols."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from newsdesk.data_models import ResultItem, ScopeCoverage

if TYPE_CHECKING:
    from newsdesk.dispatch.cancellation import CancellationToken


class ResultStore(Protocol):
    """Contract the resolver needs from a persistent result store.

    Implementations must tolerate concurrent calls from several worker
    threads and raise StoreUnavailable on any I/O failure. Blocking waits
    inside a call must end by the deadline of ``token`` when one is given.
    """

    def max_covered_scope(
        self, topic: str, token: CancellationToken | None = None
    ) -> ScopeCoverage:
        """Return the maximum days and max_items recorded for ``topic``."""
        ...

    def read_top_k(
        self,
        topic: str,
        days: int,
        max_items: int,
        token: CancellationToken | None = None,
    ) -> list[ResultItem]:
        """Return up to ``max_items`` stored items, most recent fetch first."""
        ...

    def append(
        self,
        topic: str,
        days: int,
        max_items: int,
        items: Sequence[ResultItem],
        token: CancellationToken | None = None,
    ) -> None:
        """Store one record per item, tagged with the fetch scope."""
        ...
