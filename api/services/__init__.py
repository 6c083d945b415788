"""Service layer for business logic.

Layer hierarchy:
    Routes (HTTP) / CLI -> Services (Business Logic) -> Repositories (Database)

Services should:
- Contain all business rules (the account gate, signup rules)
- Orchestrate calls to repositories
- Raise core.errors kinds (NotFoundError, ConflictError, InternalError)
- Return dataclasses (not ORM models)

Services should NOT:
- Directly execute SQL queries (use repositories)
- Know about HTTP request/response details
"""
