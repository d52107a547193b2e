"""
Infrastructure layer - external service integrations.

- database: SQLite / PostgreSQL storage adapters, schema migration and
  repositories

These wrappers translate between external formats and our domain models.
"""
