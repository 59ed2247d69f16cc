from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DeviceDescriptor(BaseModel):
    """One detected accelerator device, as reported by discovery."""

    model_config = ConfigDict(frozen=True)

    id: str
    library: str = Field(validation_alias=AliasChoices("library", "backend_family"))


class EnvironmentAssignment(BaseModel):
    name: str
    value: str

    def as_tuple(self) -> tuple[str, str]:
        return self.name, self.value

    def render(self) -> str:
        return f"{self.name}={self.value}"


class SelectorRequest(BaseModel):
    devices: list[DeviceDescriptor] = Field(default_factory=list)
    backend: str | None = None


class BackendView(BaseModel):
    family: str
    variable_name: str
    value_prefix: str


class BackendListView(BaseModel):
    backends: list[BackendView]
