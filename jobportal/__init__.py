"""
Job Portal API.

Core components:
- api: FastAPI app, auth dependencies and per-resource routers
- db: SQLAlchemy tables, sessions and cascading deletes
- utils: password/token helpers and upload storage
"""

__version__ = "1.0.0"
