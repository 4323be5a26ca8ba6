"""Domain value types (enums)."""

from .enums import (
    ADVANCED_FIELD_TYPES,
    AuditLogType,
    DocumentDataType,
    DocumentDistributionMethod,
    DocumentSigningOrder,
    DocumentSource,
    DocumentStatus,
    DocumentVisibility,
    EntityStatus,
    FieldType,
    ReadStatus,
    RecipientRole,
    Role,
    SendStatus,
    SigningStatus,
    SubscriptionStatus,
    TeamMemberRole,
    TemplateType,
)

__all__ = [
    "ADVANCED_FIELD_TYPES",
    "AuditLogType",
    "DocumentDataType",
    "DocumentDistributionMethod",
    "DocumentSigningOrder",
    "DocumentSource",
    "DocumentStatus",
    "DocumentVisibility",
    "EntityStatus",
    "FieldType",
    "ReadStatus",
    "RecipientRole",
    "Role",
    "SendStatus",
    "SigningStatus",
    "SubscriptionStatus",
    "TeamMemberRole",
    "TemplateType",
]
