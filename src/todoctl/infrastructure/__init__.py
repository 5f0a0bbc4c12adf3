"""Infrastructure layer: clocks, ids, database, repositories, notifications.

This layer depends on stdlib and third-party libs (SQLAlchemy, structlog).
It maps domain values to storage and never makes domain decisions.
The service layer bridges between domain rules and infrastructure.
"""
