"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services depend on core Protocols, never on SQLAlchemy directly
    - IO happens here; decisions happen in core/

Design Decisions:
    - One service per use-case family: submission, participation, analytics
"""
