"""SignFlow.

Backend services for a multi-tenant electronic-signature application: users and
teams own documents and templates, send them to recipients for signing, and
report on signing activity.

High-level architecture
-----------------------

- ``signflow.core``: configuration-independent building blocks.

  - SQLModel entities and repositories (``signflow.core.database``).
  - Domain enums and API I/O schemas (``signflow.core.models``).
  - Application errors, password/token hashing, logging and monitoring.

- ``signflow.services``: document, template, recipient, field and team
  operations. Every operation takes an ``AsyncSession`` and raises
  ``signflow.core.errors.AppError`` for user-facing failures.

- ``signflow.analytics``: monthly growth charts and the signing-volume
  leaderboard.

- ``signflow.integrations``: outbound HTTP clients for the Laravel backend,
  the Notify email gateway and the resident-information service.

- ``signflow.email``: HTML templates and the mailer that sends document
  notifications through Notify.

- ``signflow.server``: the FastAPI application exposing all of the above.

Typical workflow
----------------

1. An API token holder creates a document (or generates one from a template).
2. Recipients and fields are attached.
3. Each recipient signs through their signing token; when everyone has signed
   the document is completed and the signed file is handed to Laravel.
"""
