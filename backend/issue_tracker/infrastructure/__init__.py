"""Infrastructure — database sessions, issue persistence and logging setup.

Invariants:
    - Only this layer talks to SQLAlchemy engines and sessions
    - Store failures surface as DatabaseError (core/errors.py)
"""
