"""
Shared I/O building blocks.

API payloads use camelCase on the wire (``perPage``, ``totalPages``,
``signingUrl``) while Python code uses snake_case; ``ApiModel`` accepts both on
input and emits the aliases on output.
"""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for API request and response schemas."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class FindResult(BaseModel, Generic[T]):
    """One page of a paginated lookup."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: List[T]
    count: int
    current_page: int
    per_page: int
    total_pages: int
