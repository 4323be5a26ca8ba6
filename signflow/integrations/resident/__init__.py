"""Client for the resident-information service."""

from .client import ResidentServiceClient, get_resident_client
from .errors import ResidentServiceError

__all__ = ["ResidentServiceClient", "ResidentServiceError", "get_resident_client"]
