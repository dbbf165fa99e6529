"""Core Layer — pure gateway logic, no IO, no DB, no framework objects.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Functions here are pure and deterministic

Design Decisions:
    - Functional core separated from the imperative shell (routes, adapters)
"""
