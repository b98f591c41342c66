"""Registry container — looks up the registries a host application shares."""

from __future__ import annotations

from typing import Callable, Union

from shop_reports.data.endpoint_registry import EndpointRegistry
from shop_reports.data.reports_registry import ENDPOINTS_REGISTRY_NAME, ReportsRegistry
from shop_reports.exceptions import Failure
from shop_reports.registry.base import Registry

REPORTS_REGISTRY_NAME = "reports"


class RegistryContainer:
    """Holds one instance of each named registry, created on first lookup.

    Instances live as long as the container and are never reset.
    """

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], Registry]] = {
            REPORTS_REGISTRY_NAME: lambda: ReportsRegistry(container=self),
            ENDPOINTS_REGISTRY_NAME: EndpointRegistry,
        }
        self._registries: dict[str, Registry] = {}

    def register_factory(self, name: str, factory: Callable[[], Registry]) -> None:
        """Add or replace the factory for ``name``; an existing instance is kept."""
        self._factories[name] = factory

    def remove_factory(self, name: str) -> None:
        self._factories.pop(name, None)
        self._registries.pop(name, None)

    def get_registry(self, name: str) -> Union[Registry, Failure]:
        if name in self._registries:
            return self._registries[name]

        factory = self._factories.get(name)
        if factory is None:
            return Failure("invalid_registry", f"The '{name}' registry does not exist.", name)

        self._registries[name] = factory()
        return self._registries[name]

    @property
    def reports(self) -> ReportsRegistry:
        return self.get_registry(REPORTS_REGISTRY_NAME)

    @property
    def endpoints(self) -> EndpointRegistry:
        return self.get_registry(ENDPOINTS_REGISTRY_NAME)
