"""
Termbook Backend: Application Package
=======================================

Crowd-sourced term dictionary API: users submit definitions, definitions go
through moderation, approved ones are publicly searchable.

Architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← moderation rules, edit policy
    ├─────────────────────────────────────┤
    │      Repositories (Query Layer)     │  ← SQLAlchemy statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
