"""Services Layer — database queries, model calls and realtime fan-out behind the routes.

Invariants:
    - Services take an AsyncSession and plain ids; they never see Request objects
    - Authorization decisions (participant checks, ownership) live here, not in routes
"""
