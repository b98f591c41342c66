"""Reports registry — validates and stores report definitions, builds Reports."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from shop_reports.data.endpoint import EndpointRef
from shop_reports.data.endpoint_registry import EndpointRegistry
from shop_reports.data.report import Report
from shop_reports.exceptions import Failure, NotFoundError, ValidationError
from shop_reports.filters import validate_filter
from shop_reports.registry.base import Registry
from shop_reports.utils.debug import log_exception

if TYPE_CHECKING:
    from shop_reports.container import RegistryContainer

logger = logging.getLogger(__name__)

ENDPOINTS_REGISTRY_NAME = "reports:endpoints"
DEFAULT_CAPABILITY = "view_shop_reports"
REQUIRED_REPORT_FIELDS = ("label", "endpoints")


def report_defaults() -> dict[str, Any]:
    return {
        "label": "",
        "priority": 10,
        "capability": DEFAULT_CAPABILITY,
        "filters": ["dates"],
        "endpoints": {},
    }


class ReportsRegistry(Registry):
    """Registry of report definitions.

    Endpoint registration is delegated to the endpoint registry found in
    ``container``; a missing container or registry is treated as
    unavailable rather than an error.
    """

    item_error_label = "report"

    def __init__(
        self,
        container: Optional[RegistryContainer] = None,
        filter_validator: Callable[[Any], bool] = validate_filter,
    ) -> None:
        super().__init__()
        self.container = container
        self.filter_validator = filter_validator

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def register_report(self, report_id: str, attributes: dict[str, Any]) -> bool:
        """Validate and register a report definition.

        Attributes (all optional except ``label`` and ``endpoints``):
            label: Report label.
            priority: Sort priority. Default 10.
            capability: Capability needed to view the report.
            filters: Filters available to the report. Default ["dates"].
            endpoints: View group -> list of endpoint IDs or Endpoint objects.

        Raises:
            ValidationError: if the attributes are not a mapping, the label
                or endpoints are empty, the priority is not an integer, or an
                endpoint or filter is invalid.
            DuplicateItemError: if the report is already registered.
        """
        if not isinstance(attributes, Mapping):
            raise ValidationError(f"The attributes of the '{report_id}' report must be a mapping.")
        attributes = {**report_defaults(), **attributes, "id": report_id}

        self.validate_attributes(attributes, report_id, REQUIRED_REPORT_FIELDS)
        self.validate_priority(attributes, report_id)
        attributes["endpoints"] = self._validate_endpoints(report_id, attributes["endpoints"])
        attributes["filters"] = self._validate_filters(report_id, attributes["filters"])

        return self.add_item(report_id, attributes)

    add_report = register_report

    def get_report(self, report_id: str) -> dict[str, Any]:
        return self.get_item(report_id)

    def remove_report(self, report_id: str) -> None:
        self.remove_item(report_id)

    def list_reports(self, sort_key: str = "") -> list[dict[str, Any]]:
        return self.get_items_sorted(sort_key)

    def build_report(
        self,
        report: Union[str, Report],
        build_endpoints: bool = True,
    ) -> Union[Report, Failure, dict]:
        """Build a Report from a registered definition.

        A Report passed in is returned untouched. An unknown ID is logged
        and returned as an ``invalid_report`` Failure.
        """
        if isinstance(report, Report):
            return report

        try:
            record = self.get_report(report)
        except NotFoundError as exc:
            log_exception(exc)
            return Failure("invalid_report", str(exc), report)

        if not record:
            return record

        built = Report(record, endpoint_registry=self._endpoint_registry())
        if build_endpoints:
            built.build_endpoints()
        return built

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def register_endpoint(self, endpoint_id: str, attributes: dict[str, Any]) -> bool:
        """Register an endpoint with the endpoint registry.

        Returns False when the endpoint registry is unavailable.
        """
        registry = self._endpoint_registry()
        if registry is None:
            return False
        return registry.register_endpoint(endpoint_id, attributes)

    def unregister_endpoint(self, endpoint_id: str) -> None:
        registry = self._endpoint_registry()
        if registry is not None:
            registry.unregister_endpoint(endpoint_id)

    def _endpoint_registry(self) -> Optional[EndpointRegistry]:
        if self.container is None:
            return None
        registry = self.container.get_registry(ENDPOINTS_REGISTRY_NAME)
        if isinstance(registry, Failure):
            logger.debug("Endpoint registry unavailable: %s", registry.message)
            return None
        return registry

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_endpoints(self, report_id: str, endpoints: Any) -> dict[str, list[EndpointRef]]:
        message = f"The '{report_id}' report contains one or more invalidly defined endpoints."
        if not isinstance(endpoints, Mapping):
            raise ValidationError(message)

        validated: dict[str, list[EndpointRef]] = {}
        for view_group, refs in endpoints.items():
            if not isinstance(refs, (list, tuple)):
                raise ValidationError(message)
            validated[view_group] = []
            for value in refs:
                ref = EndpointRef.coerce(value)
                if ref is None:
                    raise ValidationError(message)
                validated[view_group].append(ref)
        return validated

    def _validate_filters(self, report_id: str, filters: Any) -> list[Any]:
        message = f"The '{report_id}' report contains one or more invalid filters."
        if not isinstance(filters, (list, tuple)):
            raise ValidationError(message)
        for value in filters:
            if not self.filter_validator(value):
                raise ValidationError(message)
        return list(filters)
