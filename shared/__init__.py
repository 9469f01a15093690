"""
Shared module for common infrastructure used by the organizer backend.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging

- shared.infrastructure: Database and execution context
  - db.py: SQLAlchemy engine, safe_commit()
  - context.py: Request/tenant context variables, logging filter

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.logging import get_logger
    from shared.infrastructure.db import get_engine, safe_commit
    from shared.infrastructure.context import tenant_scope
    from shared.utils.exceptions import NotFoundError, InputValidationError
"""
