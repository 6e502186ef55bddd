"""Core Layer — error taxonomy and boundary protocols, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
"""
