"""Registry — the keyed storage layer shared by reports and endpoints.

The registry provides:
- Storage: add, get and remove attribute records by ID
- Uniqueness: duplicate IDs are rejected unless overwriting is requested
- Ordering: listing sorted by priority or ID, stable by registration order
"""

from shop_reports.registry.base import Registry

__all__ = ["Registry"]
