"""Endpoint registry — reusable endpoint definitions shared between reports."""

from __future__ import annotations

from typing import Any, Union

from shop_reports.data.endpoint import VIEW_GROUPS, Endpoint, EndpointRef, EndpointView
from shop_reports.exceptions import Failure, NotFoundError, ValidationError
from shop_reports.registry.base import Registry
from shop_reports.utils.debug import log_exception

ENDPOINT_DEFAULTS: dict[str, Any] = {
    "label": "",
    "priority": 10,
    "views": {},
}

REQUIRED_ENDPOINT_FIELDS = ("label", "views")


class EndpointRegistry(Registry):
    """Registry of endpoint definitions, looked up by reports at build time."""

    item_error_label = "endpoint"

    def register_endpoint(self, endpoint_id: str, attributes: dict[str, Any]) -> bool:
        """Validate and register an endpoint definition.

        ``attributes["views"]`` maps a view group (tiles, charts, tables) to a
        dict with a callable ``data_callback`` and optional
        ``display_callback``, ``display_args``, ``register_callback`` and
        ``filters``.

        Raises:
            ValidationError: if the label or views are missing or malformed.
            DuplicateItemError: if the endpoint is already registered.
        """
        if not isinstance(attributes, dict):
            raise ValidationError(f"The attributes of the '{endpoint_id}' endpoint must be a mapping.")
        attributes = {**ENDPOINT_DEFAULTS, **attributes, "id": endpoint_id}

        self.validate_attributes(attributes, endpoint_id, REQUIRED_ENDPOINT_FIELDS)
        self.validate_priority(attributes, endpoint_id)
        if not isinstance(attributes["views"], dict):
            raise ValidationError(f"The views of the '{endpoint_id}' endpoint must be a mapping.")
        attributes["views"] = {
            view_group: _build_view(endpoint_id, view_group, view)
            for view_group, view in attributes["views"].items()
        }

        return self.add_item(endpoint_id, attributes)

    def unregister_endpoint(self, endpoint_id: str) -> None:
        self.remove_item(endpoint_id)

    def get_endpoint(self, endpoint_id: str) -> dict[str, Any]:
        return self.get_item(endpoint_id)

    def list_endpoints(self, sort: str = "") -> list[dict[str, Any]]:
        return self.get_items_sorted(sort)

    def build_endpoint(
        self,
        endpoint: Union[str, Endpoint, EndpointRef],
        view_group: str,
        report_id: str = "",
    ) -> Union[Endpoint, Failure]:
        """Resolve an endpoint reference into an initialized Endpoint.

        Returns a Failure (never raises) when the reference cannot be
        resolved for ``view_group``.
        """
        ref = EndpointRef.coerce(endpoint)
        if ref is None:
            return Failure(
                "invalid_endpoint",
                f"The endpoint reference {endpoint!r} is neither an ID nor an Endpoint.",
                endpoint,
            )

        if ref.is_resolved:
            return ref.endpoint.for_report(view_group, report_id)

        try:
            attributes = self.get_endpoint(ref.endpoint_id)
        except NotFoundError as exc:
            log_exception(exc)
            return Failure("invalid_endpoint", str(exc), ref.endpoint_id)

        view = attributes["views"].get(view_group)
        if view is None:
            return Failure(
                "invalid_view",
                f"The '{ref.endpoint_id}' endpoint does not support the '{view_group}' view.",
                ref.endpoint_id,
            )
        built = Endpoint(
            id=ref.endpoint_id,
            label=attributes["label"],
            view_group=view_group,
            view=view,
        )
        built.initialize(report_id)
        return built


def _build_view(endpoint_id: str, view_group: str, view: Any) -> EndpointView:
    if view_group not in VIEW_GROUPS:
        raise ValidationError(
            f"The '{endpoint_id}' endpoint defines an unknown view group '{view_group}'."
        )
    if isinstance(view, EndpointView):
        return view
    if not isinstance(view, dict) or not callable(view.get("data_callback")):
        raise ValidationError(
            f"The '{view_group}' view of the '{endpoint_id}' endpoint needs a callable data_callback."
        )
    for name in ("display_callback", "register_callback"):
        if view.get(name) is not None and not callable(view[name]):
            raise ValidationError(
                f"The {name} of the '{endpoint_id}' endpoint's '{view_group}' view is not callable."
            )

    return EndpointView(
        data_callback=view["data_callback"],
        display_callback=view.get("display_callback"),
        display_args=dict(view.get("display_args") or {}),
        register_callback=view.get("register_callback"),
        filters=list(view.get("filters") or []),
    )
