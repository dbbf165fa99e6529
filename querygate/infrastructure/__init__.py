"""Infrastructure Layer — the concrete database adapter and logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver exceptions are mapped to BackendExecutionError before leaving this layer
"""
