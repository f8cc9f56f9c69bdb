"""
Notes API: Application Package Initializer
==========================================

What: Marks the `notes_api` directory as a Python package.
Who:  Imported by uvicorn (`notes_api.main:app`), pytest, and the console script.

Architecture Note:
    The service follows the same layered shape throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (Notes store, proxy)    │  ← validation, error translation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy table + Pydantic
    ├─────────────────────────────────────┤
    │     Database (bounded conn pool)    │  ← one lease per statement
    └─────────────────────────────────────┘

    Routes never touch SQL or httpx directly; services never build HTTP
    responses. Collaborators (database, upstream client) are created once in
    the application lifespan and handed to handlers through dependencies.
"""

__version__ = "1.0.0"
