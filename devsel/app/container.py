from __future__ import annotations

from dataclasses import dataclass

from devsel.app.settings import Settings, load_settings
from devsel.core import EnvironmentAssignment, SelectorRequest
from devsel.services.selectors import VisibleDevicesFormatter, build_formatter


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    default_formatter: VisibleDevicesFormatter

    def resolve_selector(self, req: SelectorRequest) -> EnvironmentAssignment:
        if req.backend:
            formatter = build_formatter(req.backend)
        elif req.devices:
            formatter = build_formatter(req.devices[0].library)
        else:
            formatter = self.default_formatter
        return formatter.build_selector_env(req.devices)


def build_container(settings: Settings | None = None) -> AppContainer:
    resolved = settings or load_settings()
    return AppContainer(
        settings=resolved,
        default_formatter=build_formatter(resolved.default_backend),
    )
