"""Services Layer — the query dispatcher that sits between routes and backend.

Invariants:
    - Services never touch Request/Response objects, they return Envelopes
    - Backend access only through core/backend_protocols.py

Design Decisions:
    - Backend injected via constructor: tests pass a recording fake
"""
