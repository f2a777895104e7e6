"""Core Layer — survey validation and participation math, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions are pure and deterministic (the clock is passed in, never read)
"""
