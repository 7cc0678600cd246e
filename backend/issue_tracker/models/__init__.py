"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every issue is scoped by project

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate run
"""

from issue_tracker.models.issue import Issue  # noqa: F401
