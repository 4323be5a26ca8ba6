"""
Public Growth Chart Endpoints.

Month-bucketed counts for the public stats page. ``type=cumulative`` returns
running totals instead of per-month counts.
"""

from typing import Literal

from fastapi import APIRouter

from signflow.analytics import (
    get_completed_documents_monthly,
    get_signer_conversion_monthly,
    get_user_monthly_growth,
)
from signflow.core.models.io import ChartData
from signflow.server.services.deps import SessionDep

router = APIRouter()

ChartType = Literal["count", "cumulative"]


@router.get("/completed-documents", response_model=ChartData, summary="Completed Documents per Month")
async def completed_documents(session: SessionDep, type: ChartType = "count") -> ChartData:
    return await get_completed_documents_monthly(session, type)


@router.get("/user-growth", response_model=ChartData, summary="New Users per Month")
async def user_growth(session: SessionDep, type: ChartType = "count") -> ChartData:
    return await get_user_monthly_growth(session, type)


@router.get("/signer-conversion", response_model=ChartData, summary="Signers That Signed Up per Month")
async def signer_conversion(session: SessionDep, type: ChartType = "count") -> ChartData:
    return await get_signer_conversion_monthly(session, type)
