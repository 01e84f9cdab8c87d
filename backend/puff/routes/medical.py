"""
Puff Backend: Medical Routes
============================

What:  Symptom logs, relief insights and the doctor report under /api/medical.
How:   The report is plain text so the client can hand it straight to the
       OS share sheet.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.medical import (
    MedicalInsightsResponse,
    SymptomLogCreate,
    SymptomLogResponse,
    SymptomLogUpdate,
)
from puff.services.medical_service import medical_service

router = APIRouter(
    prefix="/api/medical",
    tags=["Medical"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.post(
    "/logs",
    response_model=SymptomLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a symptom before medicating",
)
async def create_log(
    body: SymptomLogCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SymptomLogResponse:
    return await medical_service.create_log(db, user.id, body)


@router.get("/logs", response_model=List[SymptomLogResponse], summary="Recent symptom logs")
async def list_logs(
    limit: int = Query(default=50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[SymptomLogResponse]:
    return await medical_service.list_logs(db, user.id, limit=limit)


@router.patch(
    "/logs/{log_id}",
    response_model=SymptomLogResponse,
    responses={404: {"description": "Log not found", "model": ErrorResponse}},
    summary="Record severity after medicating and what was used",
)
async def update_log(
    log_id: UUID,
    body: SymptomLogUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SymptomLogResponse:
    return await medical_service.update_log(db, user.id, log_id, body)


@router.delete(
    "/logs/{log_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Log not found", "model": ErrorResponse}},
)
async def delete_log(
    log_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await medical_service.delete_log(db, user.id, log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/insights",
    response_model=MedicalInsightsResponse,
    summary="Best-relief strain per symptom",
)
async def get_insights(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MedicalInsightsResponse:
    return await medical_service.get_insights(db, user.id)


@router.get(
    "/report",
    response_class=PlainTextResponse,
    summary="Plain-text report of the last 30 days for a doctor",
)
async def get_report(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PlainTextResponse:
    report = await medical_service.get_report(db, user.id)
    return PlainTextResponse(report, headers={"Cache-Control": "no-store"})
