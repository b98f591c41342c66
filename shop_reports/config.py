"""Load report and endpoint definitions from YAML files.

A definitions file has two top-level mappings::

    endpoints:
      sales_total:
        label: Total Sales
        views:
          tiles:
            data_callback: myshop.stats:sales_total
            display_args:
              comparison_label: All time
    reports:
      overview:
        label: Overview
        priority: 1
        filters: [dates, taxes]
        endpoints:
          tiles: [sales_total]

Callbacks are ``"package.module:function"`` strings.
"""

from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from shop_reports.container import RegistryContainer
from shop_reports.exceptions import ReportsError, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV = "SHOP_REPORTS_CONFIG"
CALLBACK_FIELDS = ("data_callback", "display_callback", "register_callback")


def default_config_path() -> Optional[Path]:
    """Definitions file named by ``SHOP_REPORTS_CONFIG``, if set."""
    value = os.environ.get(CONFIG_ENV, "")
    return Path(value) if value else None


def load_definitions(path: str | Path) -> dict[str, Any]:
    """Read a definitions file.

    Raises:
        ValidationError: if the file is not valid YAML or not a mapping.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {"endpoints": {}, "reports": {}}
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: expected a mapping with 'endpoints' and 'reports' keys")

    for section in ("endpoints", "reports"):
        if not isinstance(data.get(section) or {}, dict):
            raise ValidationError(f"{path}: '{section}' must be a mapping")
    return data


def resolve_callback(target: Any) -> Callable[..., Any]:
    """Import ``"package.module:function"`` and return the function."""
    if callable(target):
        return target
    if not isinstance(target, str) or ":" not in target:
        raise ValidationError(f"Invalid callback '{target}': expected 'module:function'")

    module_name, _, attr = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValidationError(f"Cannot import callback module '{module_name}': {e}") from e

    func = getattr(module, attr, None)
    if not callable(func):
        raise ValidationError(f"Callback '{target}' is not a callable in '{module_name}'")
    return func


def apply_definitions(data: dict[str, Any], container: RegistryContainer) -> list[str]:
    """Register every endpoint, then every report, from parsed definitions.

    Returns a list of issues found. Empty list means everything registered.
    """
    issues: list[str] = []

    for endpoint_id, attributes in (data.get("endpoints") or {}).items():
        try:
            container.reports.register_endpoint(endpoint_id, _resolve_views(attributes or {}))
        except ReportsError as e:
            issues.append(f"Endpoint '{endpoint_id}': {e}")

    for report_id, attributes in (data.get("reports") or {}).items():
        try:
            container.reports.register_report(report_id, attributes or {})
        except ReportsError as e:
            issues.append(f"Report '{report_id}': {e}")

    for issue in issues:
        logger.warning(issue)
    return issues


def load_into(path: str | Path, container: Optional[RegistryContainer] = None) -> tuple[RegistryContainer, list[str]]:
    """Load a definitions file into ``container`` (a new one by default)."""
    container = container or RegistryContainer()
    return container, apply_definitions(load_definitions(path), container)


def _resolve_views(attributes: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(attributes, dict):
        return attributes
    views = attributes.get("views") or {}
    if not isinstance(views, dict):
        return attributes

    resolved = {}
    for view_group, view in views.items():
        if isinstance(view, dict):
            view = dict(view)
            for name in CALLBACK_FIELDS:
                if view.get(name) is not None:
                    view[name] = resolve_callback(view[name])
        resolved[view_group] = view
    return {**attributes, "views": resolved}
