"""
Reporting queries.

- growth: month-bucketed counts (completed documents, new users, signer
  conversion) shaped as ``ChartData``
- signing_volume: the admin leaderboard of subscriptions by completed documents
"""

from .growth import (
    get_completed_documents_monthly,
    get_signer_conversion,
    get_signer_conversion_monthly,
    get_user_monthly_growth,
)
from .signing_volume import get_signing_volume

__all__ = [
    "get_completed_documents_monthly",
    "get_signer_conversion",
    "get_signer_conversion_monthly",
    "get_signing_volume",
    "get_user_monthly_growth",
]
