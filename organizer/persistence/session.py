"""
Pipeline-enabled session factories and unit-of-work scope.

A pipeline session:
- filters every ORM SELECT by soft delete and tenant visibility (scope.py)
- runs the interceptor chain on every flush (interceptors.py)
- shares one "now" across the whole transaction

Usage:
    factory = create_session_factory(
        get_engine(),
        clock=SystemClock(),
        tenant_context=ContextVarTenantContext(),
    )

    with unit_of_work(factory) as session:
        Repository(Space, session).create(space)
"""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Engine, event
from sqlalchemy.orm import Session, sessionmaker

from organizer.persistence.interceptors import MutationInterceptor, MutationPipeline
from organizer.persistence.scope import TENANT_CONTEXT_KEY, apply_query_scope
from organizer.services import Clock, NullTenantContext, SystemClock, TenantContext
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import CommitError

logger = get_logger(__name__)

# Session.info key holding the MutationPipeline
PIPELINE_KEY = "organizer.pipeline"


def install_pipeline(
    factory: sessionmaker,
    *,
    clock: Clock | None = None,
    tenant_context: TenantContext | None = None,
    interceptors: Sequence[MutationInterceptor] | None = None,
) -> MutationPipeline:
    """
    Wire the query scope hook and the interceptor chain into a session factory.

    Every session the factory creates afterwards carries the pipeline and the
    tenant context in ``Session.info``.

    Raises:
        ValueError: If the factory already has a pipeline.
    """
    info = dict(factory.kw.get("info") or {})
    if PIPELINE_KEY in info:
        raise ValueError("Session factory already has a mutation pipeline installed")

    if interceptors is None:
        pipeline = MutationPipeline(clock or SystemClock())
    else:
        pipeline = MutationPipeline(clock or SystemClock(), interceptors)

    info[PIPELINE_KEY] = pipeline
    info[TENANT_CONTEXT_KEY] = tenant_context or NullTenantContext()
    factory.configure(info=info)

    event.listen(factory, "do_orm_execute", apply_query_scope)
    event.listen(factory, "before_flush", pipeline.before_flush)
    event.listen(factory, "after_transaction_end", pipeline.end_transaction)

    logger.debug(
        "Mutation pipeline installed",
        interceptors=[type(interceptor).__name__ for interceptor in pipeline.interceptors],
    )
    return pipeline


def create_session_factory(
    engine: Engine,
    *,
    clock: Clock | None = None,
    tenant_context: TenantContext | None = None,
    interceptors: Sequence[MutationInterceptor] | None = None,
) -> sessionmaker:
    """Session factory bound to ``engine`` with the pipeline installed."""
    factory = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    install_pipeline(
        factory,
        clock=clock,
        tenant_context=tenant_context,
        interceptors=interceptors,
    )
    return factory


def get_pipeline(session: Session) -> MutationPipeline:
    """
    The pipeline a session was created with.

    Raises:
        RuntimeError: If the session did not come from a pipeline factory.
    """
    pipeline = session.info.get(PIPELINE_KEY)
    if pipeline is None:
        raise RuntimeError("Session was not created by a pipeline-enabled factory")
    return pipeline


def unit_of_work_now(session: Session) -> datetime:
    """The current transaction's timestamp, shared with the interceptor chain."""
    return get_pipeline(session).now(session)


def commit(session: Session, operation: str) -> None:
    """
    Commit the session, rolling back on any failure.

    Raises:
        CommitError: If the flush, an interceptor or the commit itself fails.
            Nothing from the unit of work is persisted.
    """
    try:
        safe_commit(session)
    except Exception as e:
        logger.error(
            "Failed to commit unit of work",
            operation=operation,
            error=f"{type(e).__name__}: {e}",
        )
        raise CommitError(operation) from e


@contextmanager
def unit_of_work(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    One transaction: commit on success, roll back on error, always close.

    Usage:
        with unit_of_work(factory) as session:
            session.add(entity)
    """
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    else:
        commit(session, "unit_of_work")
    finally:
        session.close()
