"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every outbound call maps its failures onto core/errors.py types

Design Decisions:
    - Thin resilient wrappers over raw SDK/HTTP clients: routes and services
      depend on the wrapper, tests swap it through dependency overrides
"""
