"""
Repositories for the lookups shared across services.
"""

from .base import BaseRepository, QueryBuilder
from .recipients import FieldRepository, RecipientRepository
from .teams import TeamRepository
from .users import ApiTokenRepository, UserRepository

__all__ = [
    "ApiTokenRepository",
    "BaseRepository",
    "FieldRepository",
    "QueryBuilder",
    "RecipientRepository",
    "TeamRepository",
    "UserRepository",
]
