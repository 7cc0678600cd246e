"""Pydantic Schemas — response shapes for API endpoints.

Invariants:
    - Request bodies are NOT parsed into schemas: raw fields go to the builders,
      which drop unknown keys instead of rejecting them

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
