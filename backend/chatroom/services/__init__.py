"""Services Layer — user and message business logic over injected collections.

Invariants:
    - Services return tagged results (model or ServiceError), never raise to routes
    - Services hold no state beyond their collection handle
"""
