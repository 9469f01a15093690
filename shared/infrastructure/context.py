"""
Execution context variables.

Holds the request correlation id and the caller's resolved tenant for the
current task or thread. Values set here are read by the logging filter and by
ContextVarTenantContext in organizer.services.
"""

import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for request ID (thread-safe)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Caller tenant resolved at the boundary, None when unauthenticated/administrative
tenant_id_var: ContextVar[uuid.UUID | None] = ContextVar("tenant_id", default=None)


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def get_current_tenant_id() -> uuid.UUID | None:
    """Get the caller's tenant for the current execution context."""
    return tenant_id_var.get()


@contextmanager
def request_scope(request_id: str | None = None) -> Generator[str, None, None]:
    """
    Bind a correlation id for the duration of the block.

    Usage:
        with request_scope() as request_id:
            ...
    """
    token = request_id_var.set(request_id or str(uuid.uuid4()))
    try:
        yield request_id_var.get()
    finally:
        request_id_var.reset(token)


@contextmanager
def tenant_scope(tenant_id: uuid.UUID | None) -> Generator[None, None, None]:
    """
    Resolve the caller's tenant for the duration of the block.

    Passing None explicitly clears the tenant (administrative access).

    Usage:
        with tenant_scope(user.tenant_id):
            spaces = Repository(Space, session).list()
    """
    token = tenant_id_var.set(tenant_id)
    try:
        yield
    finally:
        tenant_id_var.reset(token)


class ContextFilter:
    """
    Logging filter that adds request_id and tenant_id to log records.

    Usage:
        import logging
        handler = logging.StreamHandler()
        handler.addFilter(ContextFilter())
    """

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        tenant_id = tenant_id_var.get()
        record.tenant_id = str(tenant_id) if tenant_id is not None else "-"
        return True
