"""Report data — the reports and endpoints registries and the objects they build.

- Endpoints: reusable data-retrieval definitions, grouped by view (tiles, charts, tables)
- Reports: validated definitions that reference endpoints by ID or directly
- Building: turning a stored definition into a Report with resolved endpoints
"""

from shop_reports.data.endpoint import Endpoint, EndpointRef, EndpointView
from shop_reports.data.endpoint_registry import EndpointRegistry
from shop_reports.data.report import Report
from shop_reports.data.reports_registry import ReportsRegistry

__all__ = [
    "Endpoint",
    "EndpointRef",
    "EndpointView",
    "EndpointRegistry",
    "Report",
    "ReportsRegistry",
]
