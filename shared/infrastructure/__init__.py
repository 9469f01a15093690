"""
Infrastructure module: Database and execution context.

Provides:
- Engine construction and safe commits (db.py)
- Request/tenant context variables and the logging filter (context.py)
"""

from shared.infrastructure.db import (
    build_engine,
    get_engine,
    safe_commit,
)
from shared.infrastructure.context import (
    ContextFilter,
    get_current_tenant_id,
    get_request_id,
    request_scope,
    tenant_scope,
)

__all__ = [
    # db
    "build_engine",
    "get_engine",
    "safe_commit",
    # context
    "ContextFilter",
    "get_current_tenant_id",
    "get_request_id",
    "request_scope",
    "tenant_scope",
]
