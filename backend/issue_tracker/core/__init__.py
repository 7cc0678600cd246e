"""Core Layer — pure document building and validation, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, models/ or db/
    - Builders never raise for bad input; they report it as booleans

Design Decisions:
    - Functional core separated from imperative shell: routes orchestrate the
      async store calls around the synchronous builders
"""
