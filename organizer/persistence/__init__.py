"""
Persistence integrity pipeline.

- scope: soft delete and tenant visibility applied to every ORM SELECT
- interceptors: audit stamping and change-log emission on every flush
- change_types: model <-> ChangeLogEntityType registry
- session: pipeline-enabled session factories and unit of work
- repository: generic CRUD over pipeline sessions
"""

from organizer.persistence.change_types import (
    ENTITY_TYPE_BY_MODEL,
    MODEL_BY_ENTITY_TYPE,
    get_entity_type,
    get_model_class,
    try_get_entity_type,
)
from organizer.persistence.interceptors import (
    AuditFieldsInterceptor,
    ChangeLogInterceptor,
    MutationInterceptor,
    MutationPipeline,
)
from organizer.persistence.repository import Repository
from organizer.persistence.scope import (
    BYPASS_SCOPE,
    scope_predicate,
    soft_delete_predicate,
    tenant_predicate,
    unscoped,
)
from organizer.persistence.session import (
    commit,
    create_session_factory,
    install_pipeline,
    unit_of_work,
    unit_of_work_now,
)

__all__ = [
    # Scope
    "BYPASS_SCOPE",
    "scope_predicate",
    "soft_delete_predicate",
    "tenant_predicate",
    "unscoped",
    # Interceptors
    "AuditFieldsInterceptor",
    "ChangeLogInterceptor",
    "MutationInterceptor",
    "MutationPipeline",
    # Change types
    "ENTITY_TYPE_BY_MODEL",
    "MODEL_BY_ENTITY_TYPE",
    "get_entity_type",
    "get_model_class",
    "try_get_entity_type",
    # Sessions
    "commit",
    "create_session_factory",
    "install_pipeline",
    "unit_of_work",
    "unit_of_work_now",
    # Repository
    "Repository",
]
