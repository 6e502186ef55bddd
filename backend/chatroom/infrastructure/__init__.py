"""Infrastructure Layer — database, storage adapters, logging, and listener fan-out.

Invariants:
    - Infrastructure implements the protocols declared in core/repository_protocols.py
    - All SQLAlchemy failures are mapped to core storage errors before leaving this layer
"""
