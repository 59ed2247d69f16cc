from __future__ import annotations

from fastapi import FastAPI

from devsel.api.selectors import router as selectors_router
from devsel.api.system import router as system_router


def register_routes(app: FastAPI) -> None:
    app.include_router(system_router)
    app.include_router(selectors_router)
