"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, ORM operations, connection failures
- Redis: caching, sign-in sessions, OAuth state

No business/ranking logic in stores - that belongs in services.
"""
