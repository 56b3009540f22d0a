"""
Catalog source package.

Responsibilities:
- Read raw product records from the storefront export.
- Normalize them into the canonical CatalogItem schema.
- Keep the normalized catalog in memory for request handling.
"""
