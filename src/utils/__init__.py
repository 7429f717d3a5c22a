"""
Utility modules for Yelp Review Insights.

Cross-cutting concerns:
- Categories: Split category strings and derive category membership
- Storage: File I/O helpers for staging, tables and query results
"""
