"""
TripNest Backend - Package Initializer
========================================

Layered like this:

    ┌─────────────────────────────────────┐
    │  Routes + Guards (HTTP, session)    │  ← tripnest.routes, tripnest.auth
    ├─────────────────────────────────────┤
    │  Services (business rules)          │  ← tripnest.services
    ├─────────────────────────────────────┤
    │  Models & Schemas (data)            │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database (async sessions)          │  ← tripnest.database
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
