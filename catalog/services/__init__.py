"""Library Catalog - Services Package

This package contains service modules for external integrations:
- Supabase (PostgREST) table client
- HTTP client construction
"""
