"""Infrastructure Layer — database engine, SQL repositories, logging setup.

Invariants:
    - Infrastructure implements core Protocols; core never imports from here
    - Driver errors are mapped to core error types at this boundary
"""
