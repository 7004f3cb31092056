"""
TrayLoad Backend — Application Package
========================================

Cable tray engineering data service: projects, cable catalogue, cable
schedule and trays, with tray loading and support spacing computed per
project.

Architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Orchestration)    │  ← scoping, validation, snapshots
    ├──────────────────┬──────────────────┤
    │ Models & Schemas │  Loading engine  │  ← ORM + Pydantic │ pure computation
    ├──────────────────┴──────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

The loading engine (trayload.loading) depends on nothing above it and can
be used without the web stack.
"""

__version__ = "1.0.0"
