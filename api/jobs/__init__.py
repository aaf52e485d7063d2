"""
Job submission and lookup.

- Postgres-backed job store with a unique idempotency key
- Conditional insert that resolves concurrent retries to one job
- Read-only queries normalized to the public job shape
"""
