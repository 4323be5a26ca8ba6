"""
Analytics I/O models.

``ChartData`` is shaped for chart libraries: one label per month and one or
more datasets aligned with the labels.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from .common import ApiModel


class ChartDataset(BaseModel):
    label: str
    data: List[int]


class ChartData(BaseModel):
    labels: List[str]
    datasets: List[ChartDataset]


class SignerConversionRow(ApiModel):
    month: str
    count: int
    cume_count: int


class SigningVolumeRow(ApiModel):
    id: int
    name: str
    signing_volume: int
    created_at: datetime
    plan_id: Optional[str] = None


class SigningVolumeResponse(ApiModel):
    leaderboard: List[SigningVolumeRow]
    total_pages: int
