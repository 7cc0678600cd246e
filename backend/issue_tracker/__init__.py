"""Issue Tracker Package — project-scoped issue CRUD over a document-shaped store.

Invariants:
    - Package root holds only metadata (import side-effects prohibited)

Design Decisions:
    - No star exports: callers import from the submodule that owns a name
"""

__version__ = "1.0.0"
