from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from newsdesk.data_models import ResultItem, SearchRequest

if TYPE_CHECKING:
    from newsdesk.dispatch.cancellation import CancellationToken


class SearchProvider(Protocol):
    """Port for external search backends.

    Implementations return at most ``request.max_items`` items and raise
    ProviderUnavailable on any failure. They should respect the token's
    deadline so a slow backend does not hold a worker indefinitely.
    """

    def search(
        self,
        request: SearchRequest,
        token: CancellationToken | None = None,
    ) -> list[ResultItem]:
        """Execute search and return results."""
        ...
