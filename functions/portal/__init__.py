"""
Submission portal backend.

This package provides a FastAPI application for registering accounts,
logging in, and uploading batches of files that others can browse, with
store and blob-storage abstractions so the same services run against
Postgres and disk or bucket storage in production and in-memory backends
in tests.
"""
