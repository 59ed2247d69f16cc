from __future__ import annotations

from devsel.core import BackendListView
from devsel.services.selectors import list_formatters


def build_backend_list() -> BackendListView:
    return BackendListView(backends=[formatter.describe() for formatter in list_formatters()])
