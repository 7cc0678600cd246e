"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Issue endpoints answer errors as short text/plain messages

Design Decisions:
    - Thin routes: builders decide validity, the repository does the IO
"""
