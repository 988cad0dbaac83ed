"""Health check endpoint."""

from fastapi import APIRouter

from newsdesk import __version__
from newsdesk.api.dependencies import InfrastructureDep
from newsdesk.api.schemas import HealthResponse
from newsdesk.dispatch import WorkerState
from newsdesk.exceptions import StoreUnavailable

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(infra: InfrastructureDep) -> HealthResponse:
    """Report worker pool and store status."""
    states = infra.dispatcher.worker_states
    try:
        cached = infra.store.count()
        store_ok = True
    except StoreUnavailable:
        cached = 0
        store_ok = False

    return HealthResponse(
        status="ok" if store_ok and not infra.dispatcher.closed else "degraded",
        version=__version__,
        workers=len(states),
        idle_workers=sum(1 for state in states if state is WorkerState.IDLE),
        pending_tasks=infra.dispatcher.pending,
        cached_records=cached,
    )
