from __future__ import annotations

import logging
from typing import Sequence

from devsel.core import BackendView, DeviceDescriptor, EnvironmentAssignment

logger = logging.getLogger(__name__)

ID_SEPARATOR = ","


class UnsupportedBackendError(ValueError):
    pass


class VisibleDevicesFormatter:
    """Restricts one backend's runtime to a subset of its devices.

    Descriptors from other backend families are skipped with a debug record;
    they only show up here when the caller mixed up its device lists.
    """

    def __init__(self, family: str, variable_name: str, value_prefix: str = ""):
        self.family = family
        self.variable_name = variable_name
        self.value_prefix = value_prefix

    def build_selector_env(self, devices: Sequence[DeviceDescriptor]) -> EnvironmentAssignment:
        ids: list[str] = []
        for device in devices:
            if device.library != self.family:
                logger.debug(
                    "%s selector skipping over non-%s device: library=%s id=%s",
                    self.family,
                    self.family,
                    device.library,
                    device.id,
                )
                continue
            ids.append(device.id)
        return EnvironmentAssignment(
            name=self.variable_name,
            value=self.value_prefix + ID_SEPARATOR.join(ids),
        )

    def describe(self) -> BackendView:
        return BackendView(family=self.family, variable_name=self.variable_name, value_prefix=self.value_prefix)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(family={self.family!r})"


class SyclSelectorFormatter(VisibleDevicesFormatter):
    VARIABLE_NAME = "ONEAPI_DEVICE_SELECTOR"
    VALUE_PREFIX = "level_zero:"

    def __init__(self, family: str = "sycl"):
        super().__init__(family, self.VARIABLE_NAME, self.VALUE_PREFIX)


_FORMATTERS: tuple[VisibleDevicesFormatter, ...] = (
    SyclSelectorFormatter("sycl"),
    SyclSelectorFormatter("oneapi"),
    VisibleDevicesFormatter("cuda", "CUDA_VISIBLE_DEVICES"),
    VisibleDevicesFormatter("rocm", "HIP_VISIBLE_DEVICES"),
    VisibleDevicesFormatter("vulkan", "GGML_VK_VISIBLE_DEVICES"),
)


def list_formatters() -> list[VisibleDevicesFormatter]:
    return list(_FORMATTERS)


def build_formatter(family: str) -> VisibleDevicesFormatter:
    wanted = family.strip().lower()
    for formatter in _FORMATTERS:
        if formatter.family == wanted:
            return formatter
    raise UnsupportedBackendError(f"Unsupported backend: {family}")


def visible_devices_env(
    devices: Sequence[DeviceDescriptor],
    backend: str | None = None,
) -> EnvironmentAssignment | None:
    if backend is None:
        if not devices:
            return None
        # Lists are expected to be homogeneous; the first entry decides.
        backend = devices[0].library
    return build_formatter(backend).build_selector_env(devices)
