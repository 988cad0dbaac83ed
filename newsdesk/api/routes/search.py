"""Search endpoint."""

from fastapi import APIRouter

from newsdesk.api.dependencies import DispatcherDep, SettingsDep
from newsdesk.api.schemas import SearchBody, SearchResponse
from newsdesk.data_models import Provenance

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
def search(
    body: SearchBody,
    dispatcher: DispatcherDep,
    settings: SettingsDep,
) -> SearchResponse:
    """Resolve one topic search through the worker pool.

    Runs in FastAPI's threadpool and blocks on the task's future.
    """
    result = dispatcher.search(
        body.topic,
        body.days,
        body.max_items,
        timeout=settings.task_timeout_seconds,
    )
    if result.error is not None:
        raise result.error

    provenance = result.provenance or Provenance.FROM_CACHE
    return SearchResponse(
        topic=body.topic,
        provenance=provenance.value,
        items=list(result.items),
    )
