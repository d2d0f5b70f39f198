from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import Forbidden
from core.security import Principal, get_current_principal
from schemas.dashboard import DashboardSummary
from services import dashboard
from services.ownership import load_owned_wrestler

router = APIRouter(tags=["dashboard"])


@router.get(
    "/wrestlers/{wrestler_id}/dashboard/summary",
    response_model=DashboardSummary,
    summary="Бейджи дашборда борца",
)
async def wrestler_dashboard(
    wrestler_id: int,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> DashboardSummary:
    wrestler = await load_owned_wrestler(db, wrestler_id, current_user)
    response.headers["Cache-Control"] = dashboard.SUMMARY_CACHE_CONTROL
    return await dashboard.wrestler_summary(db, wrestler.id)


@router.get(
    "/coach/dashboard/summary",
    response_model=DashboardSummary,
    summary="Бейджи дашборда тренера",
)
async def coach_dashboard(
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: Principal = Depends(get_current_principal),
) -> DashboardSummary:
    if not (current_user.is_coach or current_user.is_admin):
        raise Forbidden("Only coaches have a coach dashboard")
    response.headers["Cache-Control"] = dashboard.SUMMARY_CACHE_CONTROL
    return await dashboard.coach_summary(db, current_user.user_id)
