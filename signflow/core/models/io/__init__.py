"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: camelCase base model and pagination result
- documents: Document, recipient and field I/O models
- templates: Template I/O models
- teams: Team member I/O models
- analytics: Chart and leaderboard models
"""

from .analytics import ChartData, ChartDataset, SignerConversionRow, SigningVolumeResponse, SigningVolumeRow
from .common import ApiModel, FindResult
from .documents import (
    AdminDocumentRead,
    DeletedDocumentRead,
    DocumentCompleteRequest,
    DocumentCreate,
    DocumentDetailRead,
    DocumentListResponse,
    DocumentMetaInput,
    DocumentRejectRequest,
    DocumentRead,
    FieldCreate,
    FieldRead,
    FieldUpdate,
    RecipientCreate,
    RecipientRead,
    RecipientUpdate,
    ResidentInfoRead,
    UserSummaryRead,
)
from .teams import TeamMemberRead, TeamMemberUpdate
from .templates import (
    DirectLinkRead,
    GenerateDocumentFromTemplate,
    TemplateCreate,
    TemplateDetailRead,
    TemplateExternalUpdate,
    TemplateListResponse,
    TemplateMetaRead,
    TemplateRead,
    TemplateRecipientInput,
    TemplateRecipientSet,
    TemplateRecipientsUpdate,
    TemplateUpdate,
)

__all__ = [
    "AdminDocumentRead",
    "ApiModel",
    "ChartData",
    "ChartDataset",
    "DeletedDocumentRead",
    "DirectLinkRead",
    "DocumentCompleteRequest",
    "DocumentCreate",
    "DocumentDetailRead",
    "DocumentListResponse",
    "DocumentMetaInput",
    "DocumentRejectRequest",
    "DocumentRead",
    "FieldCreate",
    "FieldRead",
    "FieldUpdate",
    "FindResult",
    "GenerateDocumentFromTemplate",
    "RecipientCreate",
    "RecipientRead",
    "RecipientUpdate",
    "ResidentInfoRead",
    "SignerConversionRow",
    "SigningVolumeResponse",
    "SigningVolumeRow",
    "TeamMemberRead",
    "TeamMemberUpdate",
    "TemplateCreate",
    "TemplateDetailRead",
    "TemplateExternalUpdate",
    "TemplateListResponse",
    "TemplateMetaRead",
    "TemplateRead",
    "TemplateRecipientInput",
    "TemplateRecipientSet",
    "TemplateRecipientsUpdate",
    "TemplateUpdate",
    "UserSummaryRead",
]
