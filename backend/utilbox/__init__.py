"""
Utilbox Backend: Application Package Initializer
=================================================

What: Marks the `utilbox` directory as a Python package.
Who:  Used by uvicorn (`uvicorn utilbox.main:app`), pytest and the `utilbox`
      console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Validation + Logic)   │  ← greeting, auth, hash, calculator
    ├─────────────────────────────────────┤
    │        Schemas (API Contracts)      │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │    Credential Store (Startup Data)  │  ← read-only snapshot of users.csv
    └─────────────────────────────────────┘

    Routes never compute anything themselves; services raise exceptions from
    utilbox.exceptions and the handlers in utilbox.main render them as the
    same {success, message} envelope every successful response uses.
"""

__version__ = "1.0.0"
