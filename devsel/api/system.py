from __future__ import annotations

from fastapi import APIRouter

from devsel.core import BackendListView
from devsel.services.capabilities import build_backend_list

router = APIRouter(tags=["system"])


@router.get("/healthz")
def healthz():
    return {"ok": True}


@router.get("/api/v1/system/backends", response_model=BackendListView)
def backends():
    return build_backend_list()
