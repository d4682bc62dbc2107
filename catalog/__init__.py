"""Library Catalog - Core Application Package

This package contains the core application modules including:
- Book record model (book.py)
- Catalog operations over the hosted table (library.py)
- Dashboard aggregation (analytics.py)
- Screen state for list, form and dashboard views (views.py)
- Single-page web front end served by the API (static/)
"""
