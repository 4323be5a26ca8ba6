"""
Version 1 API routers.

- health: liveness and version
- documents: documents with their recipients and fields
- templates: templates, direct links, external ids and document generation
- teams: team members
- sign: token-authenticated signing endpoints
- admin: admin console listings, hard delete and analytics
- growth: public growth charts
- auth_laravel: Laravel SSO token exchange
- emails: raw e-mail delivery through Notify
"""
