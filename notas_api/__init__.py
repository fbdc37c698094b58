"""
Notas API — Application Package Initializer
============================================

HTTP backend for an academic-records front-end: users (login credentials),
subjects, students and grades, stored in PostgreSQL.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, hashing, envelopes
    ├─────────────────────────────────────┤
    │         Schemas (API contract)      │  ← Pydantic request/response bodies
    ├─────────────────────────────────────┤
    │        Store (Persistence)          │  ← one SQL statement per call
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
