"""Data stores for persistence and caching.

Stores handle:
- base: the QuestionStore contract shared by every backend
- memory: process-local store (local use, tests)
- sql / postgres: PostgreSQL-backed store, session management
- remote: client-side projection over the HTTP API
- redis: listing cache

Validation and ranking rules live in services, not in stores.
"""
