"""API Layer — FastAPI routes, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is JSON, including every failure

Design Decisions:
    - Thin routes delegate to services/query_dispatch.py
"""
