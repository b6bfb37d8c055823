"""
Notes API - Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Used by uvicorn (`notes_api.main:app`), pytest, and the `notes-api` script.

Architecture Note:
    The service is a thin HTTP layer over an in-memory transactional store:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Identifier policy, transactions
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Immutable records + Pydantic wire shapes
    ├─────────────────────────────────────┤
    │        Store (In-Memory MemDB)      │  ← Snapshot reads, serialized writes
    └─────────────────────────────────────┘

    Nothing is persisted: the store lives exactly as long as the process.
"""

__version__ = "1.0.0"
