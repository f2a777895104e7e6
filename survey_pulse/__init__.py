"""Survey Pulse — survey response validation and participation analytics.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
