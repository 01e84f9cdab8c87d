"""
Puff Backend: Application Package Initializer
=============================================

What: Marks the `puff` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn puff.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Scoring, aggregation, ownership checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Every record belongs to exactly one user. Services receive the current
    user's id and never return rows owned by someone else.
"""

__version__ = "1.0.0"
