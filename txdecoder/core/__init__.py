"""
Core utilities — exceptions and process-scoped caches shared across the
chain clients, decoder pipeline, and API server.
"""
