"""
Database entities for SignFlow.

Importing this package registers every table on ``Base.metadata``.
"""

from .documents import Document, DocumentData, DocumentMeta
from .logs import DocumentAuditLog, Log
from .recipients import Field, Recipient, Signature
from .teams import Team, TeamMember
from .templates import Template, TemplateDirectLink, TemplateMeta
from .users import ApiToken, Subscription, User

__all__ = [
    "ApiToken",
    "Document",
    "DocumentAuditLog",
    "DocumentData",
    "DocumentMeta",
    "Field",
    "Log",
    "Recipient",
    "Signature",
    "Subscription",
    "Team",
    "TeamMember",
    "Template",
    "TemplateDirectLink",
    "TemplateMeta",
    "User",
]
