"""
Core business logic for meter tracking.

This module is framework-agnostic - it doesn't import FastAPI, SQLite,
PostgreSQL or any infrastructure concerns. The validation rules and the
ranking/progress math can be tested without a database.
"""
