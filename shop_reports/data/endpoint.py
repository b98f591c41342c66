"""Endpoint data models — data-retrieval specifications and references to them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from shop_reports.exceptions import Failure

# View groups an endpoint can be displayed in
VIEW_GROUPS = ("tiles", "charts", "tables")


@dataclass
class EndpointView:
    """How an endpoint produces and displays data within one view group."""

    data_callback: Callable[..., Any]
    display_callback: Optional[Callable[..., Any]] = None
    display_args: dict[str, Any] = field(default_factory=dict)
    register_callback: Optional[Callable[..., Any]] = None
    filters: list[str] = field(default_factory=list)


@dataclass
class Endpoint:
    """A single chart, table or tile within a report."""

    id: str
    label: str
    view_group: str
    view: EndpointView
    report_id: str = ""
    _initialized: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def get_data(self, **args: Any) -> Any:
        """Call the data callback with the display args overlaid by ``args``."""
        return self.view.data_callback(**{**self.view.display_args, **args})

    def display(self) -> Any:
        if self.view.display_callback is None:
            return None
        return self.view.display_callback(self, self.get_data())

    def initialize(self, report_id: str) -> None:
        """Run the endpoint's registration side effect for ``report_id``, once."""
        if self._initialized:
            return
        self.report_id = report_id
        if self.view.register_callback is not None:
            self.view.register_callback(self, report_id)
        self._initialized = True

    def for_report(self, view_group: str, report_id: str) -> Union[Endpoint, Failure]:
        """Return an initialized copy of this endpoint for one report.

        Each report gets its own copy, so the register callback runs once
        per report and the shared endpoint is left untouched.
        """
        if self.view_group != view_group:
            return Failure(
                "invalid_view",
                f"The '{self.id}' endpoint is a '{self.view_group}' endpoint, not '{view_group}'.",
                self.id,
            )
        built = replace(self, report_id="")
        built.initialize(report_id)
        return built


@dataclass(frozen=True)
class EndpointRef:
    """Reference to an endpoint: either an ID to resolve later or a built Endpoint."""

    endpoint_id: str = ""
    endpoint: Optional[Endpoint] = None

    @classmethod
    def from_id(cls, endpoint_id: str) -> EndpointRef:
        return cls(endpoint_id=endpoint_id)

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> EndpointRef:
        return cls(endpoint_id=endpoint.id, endpoint=endpoint)

    @classmethod
    def coerce(cls, value: Any) -> Optional[EndpointRef]:
        """Wrap a raw reference, or return None if it has neither accepted shape."""
        if isinstance(value, EndpointRef):
            return value
        if isinstance(value, str):
            return cls.from_id(value)
        if isinstance(value, Endpoint):
            return cls.from_endpoint(value)
        return None

    @property
    def is_resolved(self) -> bool:
        return self.endpoint is not None
