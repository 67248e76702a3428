# src/todolist/api/__init__.py
"""
API layer for the todolist service (FastAPI).

- app: app factory + lifespan
- routes: REST endpoints under /api/tarefas
- errors: exception-to-envelope mapping
- deps: dependency injection helpers
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
