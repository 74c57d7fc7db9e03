"""
GeoCats Backend — Application Package Initializer
===================================================

What: The ``geocats`` package: a REST API for users and their cats.
Who:  Imported by uvicorn (``geocats.main:app``), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes (API Layer, field rules)   │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth (identity, policy)           │  ← who is calling, may they act
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← store operations, projections
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
