"""Report — a runtime view of a registered report definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from shop_reports.data.endpoint import Endpoint, EndpointRef
from shop_reports.exceptions import Failure

if TYPE_CHECKING:
    from shop_reports.data.endpoint_registry import EndpointRegistry


class Report:
    """Report built from a snapshot of a stored definition.

    Endpoints are only resolved when ``build_endpoints()`` is called, since
    building them can register host callbacks.
    """

    def __init__(
        self,
        attributes: dict[str, Any],
        endpoint_registry: Optional[EndpointRegistry] = None,
    ) -> None:
        self.id: str = attributes.get("id", "")
        self.label: str = attributes.get("label", "")
        self.priority: int = attributes.get("priority", 10)
        self.capability: str = attributes.get("capability", "")
        self.filters: list[str] = list(attributes.get("filters", []))
        self.endpoint_refs: dict[str, list[EndpointRef]] = {
            view_group: list(refs)
            for view_group, refs in attributes.get("endpoints", {}).items()
        }
        self.endpoint_registry = endpoint_registry

        self._endpoints: dict[str, list[Endpoint]] = {}
        self._errors: list[Failure] = []
        self._built = False

    def __repr__(self) -> str:
        return f"Report(id={self.id!r}, label={self.label!r})"

    @property
    def built(self) -> bool:
        return self._built

    def build_endpoints(self) -> None:
        """Resolve every endpoint reference, collecting failures as errors.

        Calling this again starts over from the stored references.
        """
        self._endpoints = {}
        self._errors = []

        for view_group, refs in self.endpoint_refs.items():
            for ref in refs:
                result = self._build_endpoint(ref, view_group)
                if isinstance(result, Failure):
                    self._errors.append(result)
                else:
                    self._endpoints.setdefault(view_group, []).append(result)

        self._built = True

    def _build_endpoint(self, ref: EndpointRef, view_group: str) -> Endpoint | Failure:
        # Built endpoints don't need the registry; only IDs are looked up.
        if ref.is_resolved:
            return ref.endpoint.for_report(view_group, self.id)
        if self.endpoint_registry is None:
            return Failure(
                "invalid_registry",
                f"No endpoint registry is available to resolve the '{ref.endpoint_id}' "
                f"endpoint of the '{self.id}' report.",
                ref.endpoint_id,
            )
        return self.endpoint_registry.build_endpoint(ref, view_group, self.id)

    def get_endpoints(self, view_group: str = "") -> Any:
        """Built endpoints for one view group, or the whole mapping."""
        if view_group:
            return list(self._endpoints.get(view_group, []))
        return {group: list(endpoints) for group, endpoints in self._endpoints.items()}

    def has_endpoints(self, view_group: str = "") -> bool:
        if view_group:
            return bool(self._endpoints.get(view_group))
        return any(self._endpoints.values())

    def get_filters(self) -> list[str]:
        return list(self.filters)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def get_errors(self) -> list[Failure]:
        return list(self._errors)

    def is_valid(self) -> bool:
        return bool(self.label) and not self.has_errors()
