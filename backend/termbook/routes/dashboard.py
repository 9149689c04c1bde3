"""
Termbook Backend: Dashboard Route Handler
===========================================

What:  GET /dashboard/definitions, the signed-in user's submissions and
       moderation totals.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from termbook.database import get_db_session
from termbook.models import User
from termbook.schemas.definition import DashboardResponse, ErrorResponse
from termbook.security import get_current_user
from termbook.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/definitions",
    response_model=DashboardResponse,
    response_model_exclude_none=True,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Own definitions with approved/review/rejected totals",
)
async def get_dashboard(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DashboardResponse:
    summary = await dashboard_service.get_summary(db=db, user=user)
    return DashboardResponse(code=200, status="Success", data=summary)
