"""Domain enums shared by entities, services and API schemas.

Values are persisted as plain strings; member names equal their values.
"""

from __future__ import annotations

from enum import Enum


class DocumentStatus(str, Enum):
    """Lifecycle status of a document."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class DocumentSource(str, Enum):
    """How a document was created."""

    DOCUMENT = "DOCUMENT"
    TEMPLATE = "TEMPLATE"
    TEMPLATE_DIRECT_LINK = "TEMPLATE_DIRECT_LINK"


class DocumentVisibility(str, Enum):
    EVERYONE = "EVERYONE"
    MANAGER_AND_ABOVE = "MANAGER_AND_ABOVE"
    ADMIN = "ADMIN"


class DocumentDataType(str, Enum):
    """Storage format of a document's PDF payload."""

    S3_PATH = "S3_PATH"
    BYTES = "BYTES"
    BYTES_64 = "BYTES_64"


class DocumentSigningOrder(str, Enum):
    PARALLEL = "PARALLEL"
    SEQUENTIAL = "SEQUENTIAL"


class DocumentDistributionMethod(str, Enum):
    EMAIL = "EMAIL"
    NONE = "NONE"


class EntityStatus(str, Enum):
    """Soft-delete flag used by list and lookup filters."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class RecipientRole(str, Enum):
    CC = "CC"
    SIGNER = "SIGNER"
    VIEWER = "VIEWER"
    APPROVER = "APPROVER"
    ASSISTANT = "ASSISTANT"


class ReadStatus(str, Enum):
    NOT_OPENED = "NOT_OPENED"
    OPENED = "OPENED"


class SigningStatus(str, Enum):
    NOT_SIGNED = "NOT_SIGNED"
    SIGNED = "SIGNED"
    REJECTED = "REJECTED"


class SendStatus(str, Enum):
    NOT_SENT = "NOT_SENT"
    SENT = "SENT"


class FieldType(str, Enum):
    SIGNATURE = "SIGNATURE"
    FREE_SIGNATURE = "FREE_SIGNATURE"
    INITIALS = "INITIALS"
    NAME = "NAME"
    EMAIL = "EMAIL"
    DATE = "DATE"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    RADIO = "RADIO"
    CHECKBOX = "CHECKBOX"
    DROPDOWN = "DROPDOWN"
    CALENDAR = "CALENDAR"


# Field types whose ``field_meta`` is mandatory and must name the same type
ADVANCED_FIELD_TYPES = frozenset(
    {FieldType.NUMBER, FieldType.RADIO, FieldType.CHECKBOX, FieldType.DROPDOWN, FieldType.TEXT}
)


class TemplateType(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class TeamMemberRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


class Role(str, Enum):
    """Global user role."""

    USER = "USER"
    ADMIN = "ADMIN"


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    INACTIVE = "INACTIVE"


class AuditLogType(str, Enum):
    """Document audit log event types written by the service layer."""

    DOCUMENT_CREATED = "DOCUMENT_CREATED"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    DOCUMENT_META_UPDATED = "DOCUMENT_META_UPDATED"
    FIELD_CREATED = "FIELD_CREATED"
    FIELD_UPDATED = "FIELD_UPDATED"
    FIELD_DELETED = "FIELD_DELETED"
    RECIPIENT_CREATED = "RECIPIENT_CREATED"
    RECIPIENT_UPDATED = "RECIPIENT_UPDATED"
    RECIPIENT_DELETED = "RECIPIENT_DELETED"
    EMAIL_SENT = "EMAIL_SENT"
    DOCUMENT_RECIPIENT_COMPLETED = "DOCUMENT_RECIPIENT_COMPLETED"
    DOCUMENT_RECIPIENT_REJECTED = "DOCUMENT_RECIPIENT_REJECTED"
    DOCUMENT_COMPLETED = "DOCUMENT_COMPLETED"
