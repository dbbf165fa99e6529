"""Pydantic Schemas — request/response validation for the query endpoints.

Invariants:
    - Schemas validate at the system boundary, before any backend call
    - Domain limits come from core/domain_types.py

Design Decisions:
    - Separate from core: schemas are wire contracts (camelCase aliases),
      core types are what the dispatcher and backend exchange
"""
