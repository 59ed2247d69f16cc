from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from devsel.app.container import AppContainer
from devsel.app.dependencies import get_container
from devsel.core import EnvironmentAssignment, SelectorRequest
from devsel.services.selectors import UnsupportedBackendError

router = APIRouter(prefix="/api/v1/selectors", tags=["selectors"])


@router.post("/env", response_model=EnvironmentAssignment)
def selector_env(req: SelectorRequest, container: AppContainer = Depends(get_container)):
    try:
        return container.resolve_selector(req)
    except UnsupportedBackendError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
