"""
So Quoteable Backend — Application Package Initializer
=======================================================

What: Marks the `quoteable` directory as a Python package.
Why:  Enables module imports like `from quoteable.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered layout as any of our FastAPI services:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Catalog CRUD, quote cards, uploads
    ├─────────────────────────────────────┤
    │   lib (pure helpers, no I/O)        │  ← URL compiler, debounce, slugs
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The `lib` layer never imports from services or routes, so the
    transformation compiler and the debouncer can be reused from scripts.
"""

__version__ = "1.0.0"
