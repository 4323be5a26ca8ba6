"""
Core infrastructure shared by the SignFlow services and server.

Modules:
    logging_config: Logging setup and logger factory.
    monitoring: Optional Logfire instrumentation.
    errors: Application error types.
    security: Password hashing and token helpers.
    database: Entities, repositories, engine and session management.
    models: Pydantic I/O schemas.
"""
