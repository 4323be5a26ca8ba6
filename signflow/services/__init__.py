"""
Service layer.

Async functions that take the request's ``AsyncSession``, apply ownership and
state rules, write audit entries and raise ``AppError`` on failure.

Modules:
- documents: document lookups, creation, deletion and completion
- templates: template CRUD, direct/external lookups, document generation
- recipients, fields: recipient and field management on documents
- teams: team member management
- signed_documents: hand-off of signed copies to the Laravel backend
- logs: application and document audit logs
"""
