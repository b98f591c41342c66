"""shop-reports — registries for report definitions and their data endpoints."""

__version__ = "0.1.0"
