"""
Persistent job queue.

This package provides a database-backed work queue with:
- Atomic claim of one job per poll, safe under concurrent workers
- Registry-based handlers decoding JSON payloads into typed job models
- Retry until max attempts, then permanent failure
- A cooperative-shutdown polling worker
"""
