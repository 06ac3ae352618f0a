"""Obscura — story persistence service.

Invariants:
    - Package root holds only the version (import side-effects prohibited)

Design Decisions:
    - Explicit imports only, no star exports
"""

__version__ = "0.1.0"
