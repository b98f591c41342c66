"""Report filters known to the host application."""

from __future__ import annotations

from typing import Any

# Filter ID -> display label
FILTERS: dict[str, str] = {
    "dates": "Date",
    "products": "Products",
    "product_categories": "Product Categories",
    "taxes": "Exclude Taxes",
    "gateways": "Gateways",
    "discounts": "Discounts",
    "regions": "Regions",
    "countries": "Countries",
    "currencies": "Currencies",
    "order_statuses": "Order Statuses",
}


def get_filters() -> dict[str, str]:
    return dict(FILTERS)


def validate_filter(filter_value: Any) -> bool:
    """Return True if ``filter_value`` names a known report filter."""
    return isinstance(filter_value, str) and filter_value in FILTERS
