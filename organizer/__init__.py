"""
Personal organizer persistence core.

Structure:
- models: SQLAlchemy entities and the change ledger
- persistence: query scoping, mutation interceptors, repository
- validation: mutation command validation
- services: Clock and TenantContext collaborators
"""
